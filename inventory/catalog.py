"""
Read-only catalog lookups used by the order manager.

Callers receive plain ``CatalogEntry`` values rather than model instances so
that the order code never depends on catalog internals.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, Optional

from .models import Product


@dataclass(frozen=True)
class CatalogEntry:
    id: int
    name: str
    unit_price: Decimal
    is_active: bool


def _to_entry(product):
    return CatalogEntry(
        id=product.id,
        name=product.name,
        unit_price=product.price,
        is_active=product.is_active,
    )


def lookup(product_id: int) -> Optional[CatalogEntry]:
    """Return the catalog entry for ``product_id`` or None if it does not exist"""
    product = Product.objects.filter(pk=product_id).first()
    if product is None:
        return None
    return _to_entry(product)


def lookup_many(product_ids: Iterable[int]) -> Dict[int, CatalogEntry]:
    """Resolve several products in one query; missing ids are simply absent"""
    ids = set(product_ids)
    if not ids:
        return {}
    return {
        product.id: _to_entry(product)
        for product in Product.objects.filter(pk__in=ids)
    }
