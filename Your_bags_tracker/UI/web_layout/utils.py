from typing import Optional


def money_color(value):
    if value is None or value == 0:
        return "gray"
    return "red" if value < 0 else "green"


def color_negative_values(val):
    if val is None:
        return ""
    color = "red" if val < 0 else "green"
    return "color: %s" % color


def format_change(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    sign = "+" if value >= 0 else ""
    return f"{sign}{value:.2f}%"


def format_price(value: Optional[float]) -> str:
    if value is None:
        return "N/A"
    return f"${value:,.2f}"
