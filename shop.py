import argparse
from dataclasses import replace
from typing import List, Optional

from shopcore import query
from shopcore.cart import Cart, line_total
from shopcore.catalog import CatalogStore
from shopcore.logger import get_logger
from shopcore.models import CONDITIONS, Item, QuerySpec, SORT_KEYS, SORT_NAME
from shopcore.report import build_html_cart, build_plaintext_cart, money_str
from shopcore.session import SessionGate
from shopcore.storage import DB_PATH, KeyValueStore

logger = get_logger(__name__)


class Shop:
    """The stores and session gate wired to one storage file."""

    def __init__(self, db_path: str = DB_PATH):
        self.storage = KeyValueStore(db_path)
        self.catalog = CatalogStore(self.storage)
        self.cart = Cart(self.storage)
        self.session = SessionGate(self.storage)

    def initialize(self):
        self.catalog.initialize()
        self.cart.initialize()
        self.session.initialize()

    def teardown(self):
        self.catalog.teardown()
        self.cart.teardown()


def _format_item(it: Item) -> str:
    stock = "" if it.in_stock else "  [out of stock]"
    return (
        f"{it.id:>14}  {it.name} ({it.brand}, {it.condition})  {money_str(it.price)}"
        f"  {it.rating:.1f}* ({it.review_count}){stock}"
    )


def cmd_list(shop: Shop, args) -> int:
    for it in shop.catalog.list():
        print(_format_item(it))
    return 0


def cmd_browse(shop: Shop, args) -> int:
    spec = QuerySpec(
        term=args.term,
        brand=args.brand,
        condition=args.condition,
        price_min=args.min_price,
        price_max=args.max_price,
        sort=args.sort,
    )
    items = shop.catalog.view(spec)
    if not items:
        print("No laptops match your filters.")
        return 0
    for it in items:
        print(_format_item(it))
    print(f"{len(items)} of {len(shop.catalog.list())} shown")
    return 0


def cmd_brands(shop: Shop, args) -> int:
    items = shop.catalog.list()
    print("Brands: " + ", ".join(query.brands(items)))
    print("Conditions: " + ", ".join(query.conditions(items)))
    bounds = query.price_bounds(items)
    if bounds:
        print(f"Prices: {money_str(bounds[0])} - {money_str(bounds[1])}")
    return 0


def cmd_add_item(shop: Shop, args) -> int:
    if not shop.session.is_authenticated:
        print("Login required to edit the catalog.")
        return 1
    item = shop.catalog.create(
        {
            "name": args.name,
            "brand": args.brand,
            "price": args.price,
            "processor": args.processor,
            "memory_size": args.memory,
            "storage_size": args.storage,
            "screen_spec": args.screen,
            "condition": args.condition,
            "in_stock": not args.out_of_stock,
        }
    )
    print(f"Created {item.id}")
    return 0


def cmd_update_item(shop: Shop, args) -> int:
    if not shop.session.is_authenticated:
        print("Login required to edit the catalog.")
        return 1
    item = shop.catalog.get(args.id)
    if item is None:
        print(f"No item with id {args.id}")
        return 1

    changes = {
        field: value
        for field, value in (
            ("name", args.name),
            ("brand", args.brand),
            ("price", args.price),
            ("processor", args.processor),
            ("memory_size", args.memory),
            ("storage_size", args.storage),
            ("screen_spec", args.screen),
            ("condition", args.condition),
            ("in_stock", args.in_stock),
        )
        if value is not None
    }
    try:
        updated = replace(item, **changes)
    except ValueError as e:
        print(f"Invalid value: {e}")
        return 1
    shop.catalog.update(updated)
    print(f"Updated {args.id}")
    return 0


def cmd_delete_item(shop: Shop, args) -> int:
    if not shop.session.is_authenticated:
        print("Login required to edit the catalog.")
        return 1
    if not shop.catalog.delete(args.id):
        print(f"No item with id {args.id}")
        return 1
    print(f"Deleted {args.id}")
    return 0


def cmd_cart_show(shop: Shop, args) -> int:
    lines = shop.cart.lines()
    if not lines:
        print("Your cart is empty.")
        return 0
    for line in lines:
        print(
            f"{line.line_id:>14}  {line.name}  x{line.quantity}  {money_str(line_total(line))}"
        )
    print(f"Items: {shop.cart.count}  Total: {money_str(shop.cart.total)}")
    return 0


def cmd_cart_add(shop: Shop, args) -> int:
    item = shop.catalog.get(args.id)
    if item is None:
        print(f"No item with id {args.id}")
        return 1
    if not shop.cart.add(item):
        print(f"{item.name} is out of stock.")
        return 1
    print(f"Added {item.name}. Cart: {shop.cart.count} items")
    return 0


def cmd_cart_remove(shop: Shop, args) -> int:
    if shop.cart.get(args.id) is None:
        print(f"{args.id} is not in the cart")
        return 1
    shop.cart.remove(args.id)
    return 0


def cmd_cart_set(shop: Shop, args) -> int:
    if shop.cart.get(args.id) is None:
        print(f"{args.id} is not in the cart")
        return 1
    shop.cart.set_quantity(args.id, args.quantity)
    return 0


def cmd_cart_clear(shop: Shop, args) -> int:
    shop.cart.clear()
    return 0


def cmd_cart_report(shop: Shop, args) -> int:
    lines = shop.cart.lines()
    if args.html:
        print(build_html_cart(lines))
    else:
        print(build_plaintext_cart(lines))
    return 0


def cmd_login(shop: Shop, args) -> int:
    if not shop.session.authenticate(args.username, args.password):
        print("Invalid username or password.")
        return 1
    print(f"Logged in as {args.username}")
    return 0


def cmd_logout(shop: Shop, args) -> int:
    shop.session.logout()
    return 0


def cmd_whoami(shop: Shop, args) -> int:
    print(shop.session.current_user() or "(not logged in)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shop", description="Laptop shop catalog and cart.")
    parser.add_argument("--db", default=DB_PATH, help="SQLite state file (default: %(default)s)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List the catalog").set_defaults(func=cmd_list)

    p = sub.add_parser("browse", help="Search, filter and sort the catalog")
    p.add_argument("term", nargs="?", default="")
    p.add_argument("--brand")
    p.add_argument("--condition", choices=CONDITIONS)
    p.add_argument("--min-price", type=float, default=0.0)
    p.add_argument("--max-price", type=float)
    p.add_argument("--sort", choices=SORT_KEYS, default=SORT_NAME)
    p.set_defaults(func=cmd_browse)

    sub.add_parser("brands", help="Show brands, conditions and price range").set_defaults(func=cmd_brands)

    p = sub.add_parser("add-item", help="Add a laptop to the catalog (admin)")
    p.add_argument("name")
    p.add_argument("brand")
    p.add_argument("price", type=float)
    p.add_argument("--processor", default="")
    p.add_argument("--memory", default="")
    p.add_argument("--storage", default="")
    p.add_argument("--screen", default="")
    p.add_argument("--condition", choices=CONDITIONS, default="new")
    p.add_argument("--out-of-stock", action="store_true")
    p.set_defaults(func=cmd_add_item)

    p = sub.add_parser("update-item", help="Change fields of a catalog laptop (admin)")
    p.add_argument("id")
    p.add_argument("--name")
    p.add_argument("--brand")
    p.add_argument("--price", type=float)
    p.add_argument("--processor")
    p.add_argument("--memory")
    p.add_argument("--storage")
    p.add_argument("--screen")
    p.add_argument("--condition", choices=CONDITIONS)
    stock = p.add_mutually_exclusive_group()
    stock.add_argument("--in-stock", dest="in_stock", action="store_true", default=None)
    stock.add_argument("--out-of-stock", dest="in_stock", action="store_false")
    p.set_defaults(func=cmd_update_item)

    p = sub.add_parser("delete-item", help="Remove a laptop from the catalog (admin)")
    p.add_argument("id")
    p.set_defaults(func=cmd_delete_item)

    cart = sub.add_parser("cart", help="Cart operations")
    cart_sub = cart.add_subparsers(dest="cart_command", required=True)
    cart_sub.add_parser("show").set_defaults(func=cmd_cart_show)
    p = cart_sub.add_parser("add")
    p.add_argument("id")
    p.set_defaults(func=cmd_cart_add)
    p = cart_sub.add_parser("remove")
    p.add_argument("id")
    p.set_defaults(func=cmd_cart_remove)
    p = cart_sub.add_parser("set")
    p.add_argument("id")
    p.add_argument("quantity", type=int)
    p.set_defaults(func=cmd_cart_set)
    cart_sub.add_parser("clear").set_defaults(func=cmd_cart_clear)
    p = cart_sub.add_parser("report")
    p.add_argument("--html", action="store_true")
    p.set_defaults(func=cmd_cart_report)

    p = sub.add_parser("login")
    p.add_argument("username")
    p.add_argument("password")
    p.set_defaults(func=cmd_login)
    sub.add_parser("logout").set_defaults(func=cmd_logout)
    sub.add_parser("whoami").set_defaults(func=cmd_whoami)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        shop = Shop(args.db)
        shop.initialize()
        try:
            return args.func(shop, args)
        finally:
            shop.teardown()
    except Exception as e:
        logger.exception("Fatal shop error: %s", e)
        return 2


if __name__ == "__main__":
    raise SystemExit(main())
