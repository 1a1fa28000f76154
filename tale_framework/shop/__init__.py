"""
Shop module - per-scene catalogs and gold transactions.
"""

from tale_framework.shop.economy import (
    ShopCatalog,
    resolve_catalog,
    buy_price,
    buy,
    sell,
)

__all__ = [
    "ShopCatalog",
    "resolve_catalog",
    "buy_price",
    "buy",
    "sell",
]
