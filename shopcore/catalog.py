import time
from typing import Any, Dict, List, Optional

from . import query
from .defaults import default_catalog
from .logger import get_logger
from .models import Item, QuerySpec
from .storage import CATALOG_KEY, KeyValueStore

logger = get_logger(__name__)


class CatalogStore:
    """
    Owns the list of sellable items and mirrors it to storage under CATALOG_KEY.

    Every mutating call writes the whole list. update/delete on an unknown id
    are no-ops and report it through their return value.
    """

    def __init__(self, storage: KeyValueStore):
        self.storage = storage
        self._items: List[Item] = []
        self._last_id_ms = 0
        self._view_cache: Dict[Any, List[Item]] = {}
        self.last_view: Optional[List[Item]] = None

    # ---------- lifecycle ----------
    def initialize(self):
        items = self._load_persisted()
        if items:
            logger.info("Loaded %d catalog items from storage.", len(items))
            self._replace(items)
            return

        defaults = default_catalog()
        logger.info("Seeding catalog with %d default items.", len(defaults))
        self._replace(defaults)
        self._persist()

    def teardown(self):
        self._replace([])
        self.last_view = None

    def _load_persisted(self) -> List[Item]:
        data = self.storage.load_json(CATALOG_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Stored catalog is not a list (%s); using defaults.", type(data).__name__)
            return []
        try:
            items = [Item.from_dict(rec) for rec in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Stored catalog is corrupt, using defaults: %r", e)
            return []
        if len({it.id for it in items}) != len(items):
            logger.warning("Stored catalog has duplicate ids; using defaults.")
            return []
        return items

    def _replace(self, items: List[Item]):
        self._items = items
        self._touch()

    def _touch(self):
        self._view_cache.clear()

    def _persist(self) -> bool:
        return self.storage.save_json(CATALOG_KEY, [it.to_dict() for it in self._items])

    # ---------- ids ----------
    def _next_id(self) -> str:
        existing = {it.id for it in self._items}
        candidate = max(time.time_ns() // 1_000_000, self._last_id_ms + 1)
        while str(candidate) in existing:
            candidate += 1
        self._last_id_ms = candidate
        return str(candidate)

    # ---------- operations ----------
    def list(self) -> List[Item]:
        return list(self._items)

    def get(self, item_id: str) -> Optional[Item]:
        for it in self._items:
            if it.id == item_id:
                return it
        return None

    def create(self, fields: Dict[str, Any]) -> Item:
        """Add an item built from fields (any "id" in fields is ignored)."""
        data = {k: v for k, v in fields.items() if k != "id"}
        item = Item(id=self._next_id(), **data)
        self._items.append(item)
        self._touch()
        self._persist()
        logger.info("Created item %s (%s).", item.id, item.name)
        return item

    def update(self, item: Item) -> bool:
        for idx, existing in enumerate(self._items):
            if existing.id == item.id:
                self._items[idx] = item
                self._touch()
                self._persist()
                logger.info("Updated item %s.", item.id)
                return True
        logger.debug("Update for unknown item id %s ignored.", item.id)
        return False

    def delete(self, item_id: str) -> bool:
        remaining = [it for it in self._items if it.id != item_id]
        if len(remaining) == len(self._items):
            logger.debug("Delete for unknown item id %s ignored.", item_id)
            return False
        self._items = remaining
        self._touch()
        self._persist()
        logger.info("Deleted item %s.", item_id)
        return True

    def view(self, spec: QuerySpec) -> List[Item]:
        """Filtered/sorted view of the current items, memoized per catalog revision."""
        result = self._view_cache.get(spec)
        if result is None:
            result = query.view(self._items, spec)
            self._view_cache[spec] = result
        self.last_view = list(result)
        return list(result)
