import os
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader, select_autoescape

from .cart import item_count, line_total, order_total
from .models import CartLine

# Resolve template directory relative to this file
TEMPLATE_DIR = Path(__file__).resolve().parent / "templates"
env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=select_autoescape(["html"]),
    trim_blocks=True,
    lstrip_blocks=True,
)

REPORT_THEME = os.getenv("SHOP_REPORT_THEME", "dark").strip().lower()
if REPORT_THEME not in ("light", "dark"):
    REPORT_THEME = "dark"

THEMES = {
    "light": {
        "page_bg": "#f5f5f5",
        "card_bg": "#ffffff",
        "card_border": "#e0e0e0",
        "text_primary": "#202124",
        "text_secondary": "#555",
        "text_muted": "#999",
        "accent": "#1a73e8",
    },
    "dark": {
        "page_bg": "#121212",
        "card_bg": "#1E1E1E",
        "card_border": "#333333",
        "text_primary": "#F1F1F1",
        "text_secondary": "#BBBBBB",
        "text_muted": "#777777",
        "accent": "#8AB4F8",
    },
}


def money_str(amount: float) -> str:
    return f"${amount:,.2f}"


def _line_rows(lines: List[CartLine]) -> List[dict]:
    return [
        {
            "line_id": line.line_id,
            "name": line.name,
            "brand": line.item.brand,
            "condition": line.item.condition,
            "image_ref": line.item.image_ref,
            "quantity": line.quantity,
            "unit_str": money_str(line.price),
            "total_str": money_str(line_total(line)),
        }
        for line in lines
    ]


def build_plaintext_cart(lines: List[CartLine]) -> str:
    template = env.get_template("cart_text.txt")
    return template.render(
        lines=_line_rows(lines),
        count=item_count(lines),
        total_str=money_str(order_total(lines)),
    )


def build_html_cart(lines: List[CartLine], theme: str = REPORT_THEME) -> str:
    if theme not in THEMES:
        theme = "dark"
    template = env.get_template("cart.html")
    return template.render(
        title="Your cart",
        lines=_line_rows(lines),
        count=item_count(lines),
        total_str=money_str(order_total(lines)),
        colors=THEMES[theme],
    )
