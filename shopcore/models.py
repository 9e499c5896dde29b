from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Dict

CONDITIONS = ("new", "used", "refurbished")

SORT_NAME = "name"
SORT_PRICE_ASC = "price-ascending"
SORT_PRICE_DESC = "price-descending"
SORT_RATING_DESC = "rating-descending"
SORT_KEYS = (SORT_NAME, SORT_PRICE_ASC, SORT_PRICE_DESC, SORT_RATING_DESC)


@dataclass
class Item:
    """
    One sellable laptop configuration in the catalog.
    Hardware fields (processor, memory_size, ...) are free text for display.
    """
    id: str
    name: str
    brand: str
    price: float
    processor: str = ""
    memory_size: str = ""
    storage_size: str = ""
    screen_spec: str = ""
    condition: str = "new"
    image_ref: str = ""
    rating: float = 0.0
    review_count: int = 0
    in_stock: bool = True

    def __post_init__(self):
        if self.condition not in CONDITIONS:
            raise ValueError(f"unknown condition {self.condition!r}")
        if self.price < 0:
            raise ValueError(f"price must be non-negative, got {self.price}")
        if not 0.0 <= self.rating <= 5.0:
            raise ValueError(f"rating must be within 0-5, got {self.rating}")
        if self.review_count < 0:
            raise ValueError(f"review_count must be non-negative, got {self.review_count}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """
        Build an Item from a stored record. Unknown keys are ignored;
        a missing required key raises KeyError, a wrong-typed value TypeError
        and an out-of-range value ValueError.
        """
        known = {f.name for f in fields(cls)}
        kwargs = {k: v for k, v in data.items() if k in known}
        for required in ("id", "name", "brand", "price"):
            if required not in kwargs:
                raise KeyError(required)

        for key, value in kwargs.items():
            if key in _TEXT_FIELDS:
                if not isinstance(value, str):
                    raise TypeError(f"{key} must be a string, got {type(value).__name__}")
            elif key in ("price", "rating"):
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    raise TypeError(f"{key} must be a number, got {type(value).__name__}")
            elif key == "review_count":
                _require_int(key, value)
            elif key == "in_stock":
                if not isinstance(value, bool):
                    raise TypeError(f"in_stock must be a boolean, got {type(value).__name__}")

        kwargs["price"] = float(kwargs["price"])
        if "rating" in kwargs:
            kwargs["rating"] = float(kwargs["rating"])
        return cls(**kwargs)


_TEXT_FIELDS = (
    "id",
    "name",
    "brand",
    "processor",
    "memory_size",
    "storage_size",
    "screen_spec",
    "condition",
    "image_ref",
)


def _require_int(key: str, value: Any):
    # bool is an int subclass; stored JSON true/false is not a count
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{key} must be an integer, got {type(value).__name__}")


@dataclass
class CartLine:
    """Snapshot of an Item taken when it was added, plus a quantity."""
    item: Item
    quantity: int = 1

    @property
    def line_id(self) -> str:
        return self.item.id

    @property
    def name(self) -> str:
        return self.item.name

    @property
    def price(self) -> float:
        return self.item.price

    def to_dict(self) -> Dict[str, Any]:
        data = self.item.to_dict()
        data["quantity"] = self.quantity
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        quantity = data["quantity"]
        _require_int("quantity", quantity)
        if quantity <= 0:
            raise ValueError(f"quantity must be positive, got {quantity}")
        return cls(item=Item.from_dict(data), quantity=quantity)


@dataclass(frozen=True)
class QuerySpec:
    """Filter and sort parameters for a catalog view. price_max None means no ceiling."""
    term: str = ""
    brand: str | None = None
    condition: str | None = None
    price_min: float = 0.0
    price_max: float | None = None
    sort: str = SORT_NAME


def snapshot(item: Item) -> Item:
    """Detached copy of an item, so later catalog edits don't reach the cart."""
    return replace(item)
