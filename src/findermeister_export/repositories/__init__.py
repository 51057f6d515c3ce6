"""Repositories package."""

from findermeister_export.repositories.catalog import CatalogRepository, quote_identifier

__all__ = [
    "CatalogRepository",
    "quote_identifier",
]
