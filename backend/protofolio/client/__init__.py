"""
Protofolio — Catalog Client
=============================

    - api.py:         RecordsClient, async HTTP client for the /records API
    - controller.py:  CatalogController, the in-memory catalog view state
"""

from protofolio.client.api import ApiError, RecordsClient
from protofolio.client.controller import CatalogController, EmptyState, ModalState

__all__ = [
    "ApiError",
    "CatalogController",
    "EmptyState",
    "ModalState",
    "RecordsClient",
]
