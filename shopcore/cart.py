from typing import Iterable, List, Optional

from .logger import get_logger
from .models import CartLine, Item, snapshot
from .storage import CART_KEY, KeyValueStore

logger = get_logger(__name__)


def line_total(line: CartLine) -> float:
    return line.price * line.quantity


def order_total(lines: Iterable[CartLine]) -> float:
    return sum((line_total(line) for line in lines), 0.0)


def item_count(lines: Iterable[CartLine]) -> int:
    return sum(line.quantity for line in lines)


class Cart:
    """
    Ordered cart lines keyed by item id, mirrored to storage under CART_KEY.

    Lines hold a copy of the item taken at add time; later catalog edits
    don't change them. Operations on an unknown line id are no-ops.
    """

    def __init__(self, storage: KeyValueStore):
        self.storage = storage
        self._lines: List[CartLine] = []

    def initialize(self):
        self._lines = self._load_persisted()
        logger.info("Cart loaded with %d lines.", len(self._lines))

    def teardown(self):
        self._lines = []

    def _load_persisted(self) -> List[CartLine]:
        data = self.storage.load_json(CART_KEY)
        if data is None:
            return []
        if not isinstance(data, list):
            logger.warning("Stored cart is not a list (%s); starting empty.", type(data).__name__)
            return []
        try:
            lines = [CartLine.from_dict(rec) for rec in data]
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            logger.warning("Stored cart is corrupt, starting empty: %r", e)
            return []

        # Older data may repeat an id; fold repeats into one line.
        merged: List[CartLine] = []
        for line in lines:
            existing = next((m for m in merged if m.line_id == line.line_id), None)
            if existing:
                existing.quantity += line.quantity
            else:
                merged.append(line)
        return merged

    def _persist(self) -> bool:
        return self.storage.save_json(CART_KEY, [line.to_dict() for line in self._lines])

    def lines(self) -> List[CartLine]:
        return list(self._lines)

    def get(self, line_id: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.line_id == line_id:
                return line
        return None

    def add(self, item: Item) -> bool:
        """
        Add one unit of item. Returns False (and changes nothing) when the
        item is out of stock.
        """
        if not item.in_stock:
            logger.info("Rejected add of out-of-stock item %s (%s).", item.id, item.name)
            return False

        line = self.get(item.id)
        if line:
            line.quantity += 1
        else:
            line = CartLine(item=snapshot(item), quantity=1)
            self._lines.append(line)
        self._persist()
        logger.info("Cart: %s x%d.", item.id, line.quantity)
        return True

    def remove(self, line_id: str):
        remaining = [line for line in self._lines if line.line_id != line_id]
        if len(remaining) == len(self._lines):
            return
        self._lines = remaining
        self._persist()
        logger.info("Cart: removed %s.", line_id)

    def set_quantity(self, line_id: str, quantity: int):
        if quantity <= 0:
            self.remove(line_id)
            return
        line = self.get(line_id)
        if not line:
            return
        line.quantity = int(quantity)
        self._persist()
        logger.info("Cart: %s x%d.", line_id, line.quantity)

    def clear(self):
        self._lines = []
        self._persist()
        logger.info("Cart cleared.")

    @property
    def total(self) -> float:
        return order_total(self._lines)

    @property
    def count(self) -> int:
        return item_count(self._lines)
