import os
from typing import Optional

from .logger import get_logger
from .storage import SESSION_KEY, KeyValueStore

logger = get_logger(__name__)

ADMIN_USERNAME = os.getenv("SHOP_ADMIN_USERNAME", "admin")
ADMIN_PASSWORD = os.getenv("SHOP_ADMIN_PASSWORD", "admin123")


class SessionGate:
    """
    Single-admin login state persisted under SESSION_KEY.
    Only reports who is logged in; it does not guard the stores itself.
    """

    def __init__(
        self,
        storage: KeyValueStore,
        username: str = ADMIN_USERNAME,
        password: str = ADMIN_PASSWORD,
    ):
        self.storage = storage
        self._username = username
        self._password = password
        self._user: Optional[str] = None

    def initialize(self):
        self._user = None
        data = self.storage.load_json(SESSION_KEY)
        if data is None:
            return
        try:
            if data["is_authenticated"] and data["user"]["username"]:
                self._user = str(data["user"]["username"])
        except (KeyError, TypeError) as e:
            logger.warning("Stored session is corrupt, discarding it: %r", e)
            self.storage.clear(SESSION_KEY)

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def current_user(self) -> Optional[str]:
        return self._user

    def authenticate(self, username: str, password: str) -> bool:
        if username != self._username or password != self._password:
            logger.info("Login failed for %r.", username)
            return False
        self._user = username
        self.storage.save_json(
            SESSION_KEY, {"is_authenticated": True, "user": {"username": username}}
        )
        logger.info("Logged in as %r.", username)
        return True

    def logout(self):
        self._user = None
        self.storage.clear(SESSION_KEY)
