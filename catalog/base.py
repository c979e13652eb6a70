"""
Catalog collaborator interface.

The matching engine only ever reads from a catalog. Implementations answer
a CatalogQuery with Product records; they must not mutate their data.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from matching.context import Product, SearchCriteria


class CatalogError(Exception):
    """Raised when the catalog cannot answer a query."""


@dataclass(frozen=True)
class SortKey:
    """Sort by field, descending unless told otherwise."""
    field: str
    descending: bool = True


@dataclass(frozen=True)
class CatalogQuery:
    """
    Read-only catalog request.

    Attributes:
        criteria: Field predicates (None = no field filtering)
        brand_pattern: Regex applied to the joined brand name,
                       case-insensitive. Products without a matching
                       brand are dropped.
        sort: Sort keys, applied in order
        limit: Maximum records returned (None = unbounded)
    """
    criteria: Optional["SearchCriteria"] = None
    brand_pattern: Optional[str] = None
    sort: tuple[SortKey, ...] = ()
    limit: Optional[int] = None


class Catalog(ABC):
    """
    Read-only product catalog.

    Implementations should be safe to call concurrently: a query must not
    change any state another query can observe.
    """

    @abstractmethod
    def find(self, query: CatalogQuery) -> list["Product"]:
        """
        Run a query.

        Args:
            query: What to match, how to sort, how many to return

        Returns:
            Matching products (possibly empty)

        Raises:
            CatalogError: The catalog could not be read
        """
        pass
