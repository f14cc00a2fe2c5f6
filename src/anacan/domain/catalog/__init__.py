"""Declarative catalog of collections and seed data."""

from anacan.domain.catalog.collections import COLLECTIONS, get_collection, select_collections
from anacan.domain.catalog.seeds import SEED_SETS, select_seed_records

__all__ = [
    "COLLECTIONS",
    "SEED_SETS",
    "get_collection",
    "select_collections",
    "select_seed_records",
]
