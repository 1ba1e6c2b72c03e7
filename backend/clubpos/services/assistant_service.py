# Overview: Read-only catalog projection handed to the external assistant as context.

from __future__ import annotations

from decimal import Decimal


def _format_number(value) -> str:
    dec = Decimal(value)
    if dec == dec.to_integral_value():
        return str(dec.to_integral_value())
    return format(dec.normalize(), "f")


def describe_product(product, currency_symbol: str = "€") -> str:
    """One line: name (category, strain): description. Stock: 120g, Price: €15.00/g"""
    unit = product.unit_label
    strain = product.strain_type or "N/A"
    price = f"{currency_symbol}{product.price_cents / 100:.2f}"
    return (
        f"{product.name} ({product.category}, {strain}): {product.description or ''}. "
        f"Stock: {_format_number(product.stock_quantity)}{unit}, Price: {price}/{unit}"
    )


def build_inventory_context(products, currency_symbol: str = "€") -> str:
    """
    Plain-text inventory listing, one product per line.

    Only reads product attributes; the assistant has no write path back.
    """
    return "\n".join(describe_product(p, currency_symbol) for p in products)


CURRENCY_SYMBOLS = {"EUR": "€", "USD": "$", "GBP": "£"}


def currency_symbol(code: str) -> str:
    return CURRENCY_SYMBOLS.get((code or "").upper(), f"{code} ")
