"""Base service with common state for all zapdos services."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from zapdos.core.client import ZapdosClient


class BaseService:
    """Base service class with common functionality."""

    def __init__(self, client: "ZapdosClient") -> None:
        """Initialize service with a Zapdos client.

        Args:
            client: Configured ZapdosClient instance
        """
        self.client = client
