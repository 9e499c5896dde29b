import locale
from typing import Iterable, List, Optional, Tuple

from .models import (
    Item,
    QuerySpec,
    SORT_NAME,
    SORT_PRICE_ASC,
    SORT_PRICE_DESC,
    SORT_RATING_DESC,
)


def matches(item: Item, spec: QuerySpec) -> bool:
    """
    True when item passes every filter in spec:
    - term is a case-insensitive substring of name, brand or processor (empty passes)
    - brand / condition unset or exactly equal
    - price_min <= price <= price_max (inclusive; no ceiling when price_max is None)
    """
    term = spec.term.casefold()
    if term and not (
        term in item.name.casefold()
        or term in item.brand.casefold()
        or term in item.processor.casefold()
    ):
        return False

    if spec.brand and item.brand != spec.brand:
        return False

    if spec.condition and item.condition != spec.condition:
        return False

    if item.price < spec.price_min:
        return False
    if spec.price_max is not None and item.price > spec.price_max:
        return False

    return True


def _name_key(item: Item) -> str:
    return locale.strxfrm(item.name.casefold())


def sort_items(items: Iterable[Item], sort: str = SORT_NAME) -> List[Item]:
    """
    Stable sort by one of the SORT_* keys. Unknown keys sort by name.
    """
    if sort == SORT_PRICE_ASC:
        return sorted(items, key=lambda it: it.price)
    if sort == SORT_PRICE_DESC:
        return sorted(items, key=lambda it: it.price, reverse=True)
    if sort == SORT_RATING_DESC:
        return sorted(items, key=lambda it: it.rating, reverse=True)
    return sorted(items, key=_name_key)


def view(items: Iterable[Item], spec: QuerySpec) -> List[Item]:
    """Filtered then sorted items. Does not touch its inputs."""
    return sort_items((it for it in items if matches(it, spec)), spec.sort)


def brands(items: Iterable[Item]) -> List[str]:
    seen: List[str] = []
    for it in items:
        if it.brand not in seen:
            seen.append(it.brand)
    return seen


def conditions(items: Iterable[Item]) -> List[str]:
    seen: List[str] = []
    for it in items:
        if it.condition not in seen:
            seen.append(it.condition)
    return seen


def price_bounds(items: Iterable[Item]) -> Optional[Tuple[float, float]]:
    prices = [it.price for it in items]
    if not prices:
        return None
    return min(prices), max(prices)
