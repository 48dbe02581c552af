"""Query builder for the ``/v1/query`` endpoint.

The chain is ``from_(resource).select(columns)`` followed by any of
``where``, ``limit``, ``sort`` and ``cursor``, and finally ``fetch()``::

    service.from_("object_storage").select("id", "metadata") \\
        .where("metadata->>'content_type'", "~", "^video/") \\
        .sort("desc").limit(10).fetch()

sends::

    {"from": "object_storage", "select": ["id", "metadata"],
     "where": [["metadata->>'content_type'", "~", "^video/"]],
     "sort": "desc", "limit": 10}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel as PydanticBaseModel

from zapdos.core.client import QUERY_PATH
from zapdos.core.exceptions import APIError, OperationError, ZapdosError
from zapdos.core.validation import validate_sort_order

from .base import BaseService

if TYPE_CHECKING:
    from zapdos.core.client import ZapdosClient

M = TypeVar("M", bound=PydanticBaseModel)


class QueryBuilder:
    """Chainable query with all filters; call :meth:`fetch` to run it."""

    def __init__(self, client: "ZapdosClient", resource: str, columns: list[str]) -> None:
        self.client = client
        self.resource = resource
        self.params: dict[str, Any] = {"select": columns or ["*"], "where": []}

    def where(self, field: str, operator: str, value: str | int | float) -> QueryBuilder:
        self.params["where"].append([field, operator, value])
        return self

    def limit(self, limit: int) -> QueryBuilder:
        self.params["limit"] = limit
        return self

    def sort(self, sort: str) -> QueryBuilder:
        self.params["sort"] = validate_sort_order(sort)
        return self

    def cursor(self, cursor: str) -> QueryBuilder:
        self.params["cursor"] = cursor
        return self

    def build(self) -> dict[str, Any]:
        """Request body with ``from`` at the top level."""
        return {"from": self.resource, **self.params}

    def fetch(self) -> dict[str, Any]:
        """Run the query.

        Returns:
            The response body, ``{"data": ...}`` on success. Failures come
            back as ``{"error": {"message": ...}}`` instead of raising.
        """
        try:
            return self.client.post(QUERY_PATH, json=self.build()).json()
        except APIError as e:
            if isinstance(e.body, dict) and "error" in e.body:
                return e.body
            return {"error": {"message": e.message}}
        except ZapdosError as e:
            return {"error": {"message": e.message}}
        except ValueError:
            return {"error": {"message": "Invalid JSON in query response"}}


class UnselectedQueryBuilder:
    """Builder returned by ``from_``; only :meth:`select` is available."""

    def __init__(self, client: "ZapdosClient", resource: str) -> None:
        self.client = client
        self.resource = resource

    def select(self, *columns: str) -> QueryBuilder:
        """Choose the columns to return; all columns if none are given."""
        return QueryBuilder(self.client, self.resource, list(columns))


class QueryService(BaseService):
    """Entry point for ad-hoc queries."""

    def from_(self, resource: str) -> UnselectedQueryBuilder:
        """Start a query against a resource."""
        return UnselectedQueryBuilder(self.client, resource)

    def fetch_models(self, builder: QueryBuilder, model: type[M]) -> list[M]:
        """Run a query and parse its rows.

        Raises:
            OperationError: If the query returned an error body.
        """
        result = builder.fetch()
        if result.get("error"):
            error = result["error"]
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise OperationError("query", message or "Query failed", {"from": builder.resource})

        rows = result.get("data") or []
        return [model.model_validate(row) for row in rows]
