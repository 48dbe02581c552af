"""Service layer for zapdos operations.

Provides service classes that encapsulate Zapdos REST API operations.
"""

from __future__ import annotations

from .base import BaseService
from .query import QueryBuilder, QueryService, UnselectedQueryBuilder
from .storage import StorageService

__all__ = [
    "BaseService",
    "QueryBuilder",
    "QueryService",
    "StorageService",
    "UnselectedQueryBuilder",
]
