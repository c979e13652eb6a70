"""
pandas-backed product catalog.

Holds products left-joined to their brands in one DataFrame and answers
CatalogQuery requests with boolean masks. The frame is never modified
after construction, so concurrent queries are safe.
"""

import operator
import re
from typing import Any, Optional

import pandas as pd

from catalog.base import Catalog, CatalogError, CatalogQuery
from matching.context import Brand, FieldCondition, Product
from matching.structured_logging import get_logger

# Module-level logger
_logger = get_logger("catalog.frame")

NUMERIC_FIELDS = ("price", "stock", "rating", "sold", "storage", "ram", "battery")

PRODUCT_FIELDS = (
    "id", "name", "price", "stock", "rating", "sold", "storage", "ram",
    "battery", "chipset", "camera_rear", "camera_front", "description",
    "variants", "created_at",
)

# Columns used for the brand join, never exposed as metadata
_JOIN_COLUMNS = ("brand_id", "brand_name", "_brand_key")

_COMPARISONS = {
    "eq": operator.eq,
    "lt": operator.lt,
    "gt": operator.gt,
    "gte": operator.ge,
}


def _join_key(value: Any) -> Optional[str]:
    """Brand reference as a string key: 1, 1.0 and "1" all join to "1"."""
    if value is None:
        return None
    if isinstance(value, float):
        if pd.isna(value):
            return None
        if value.is_integer():
            return str(int(value))
    return str(value).strip() or None


def _clean(value: Any) -> Any:
    """Convert NaN to None and numpy/pandas scalars to Python types."""
    if isinstance(value, (list, dict, tuple)):
        return value
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        return value
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if hasattr(value, 'item'):
        return value.item()
    return value


def _as_int(value: Any) -> Optional[int]:
    value = _clean(value)
    return int(value) if value is not None else None


def _as_float(value: Any) -> Optional[float]:
    value = _clean(value)
    return float(value) if value is not None else None


class DataFrameCatalog(Catalog):
    """
    Read-only catalog over a pandas DataFrame.

    Example:
        catalog = DataFrameCatalog.from_records(
            [{"id": 1, "name": "Samsung Galaxy A51 128GB", "brand_id": 2,
              "price": 6_000_000, "storage": 128}],
            brands=[{"id": 2, "name": "Samsung"}],
        )
        catalog.find(CatalogQuery(brand_pattern="samsung", limit=10))
    """

    def __init__(self, products: pd.DataFrame, brands: Optional[pd.DataFrame] = None):
        frame = products.copy()

        for column in NUMERIC_FIELDS:
            if column in frame.columns:
                frame[column] = pd.to_numeric(frame[column], errors="coerce")
        if "created_at" in frame.columns:
            frame["created_at"] = pd.to_datetime(frame["created_at"], errors="coerce")

        if "brand_id" in frame.columns and brands is not None and not brands.empty:
            brand_table = pd.DataFrame({
                "_brand_key": brands["id"].map(_join_key),
                "brand_name": brands["name"],
            }).dropna(subset=["_brand_key"]).drop_duplicates("_brand_key")
            # The brands table is authoritative for names
            frame = frame.drop(columns=["brand_name", "_brand_key"], errors="ignore")
            frame["_brand_key"] = frame["brand_id"].map(_join_key)
            frame = frame.merge(brand_table, on="_brand_key", how="left")
        elif "brand_name" not in frame.columns:
            frame["brand_name"] = None

        self._frame = frame.reset_index(drop=True)

    @classmethod
    def from_records(
        cls,
        products: list[dict[str, Any]],
        brands: Optional[list[dict[str, Any]]] = None,
    ) -> "DataFrameCatalog":
        """Build a catalog from plain dicts (tests, fixtures, API payloads)."""
        brand_frame = pd.DataFrame(brands) if brands else None
        return cls(pd.DataFrame(products), brand_frame)

    def __len__(self) -> int:
        return len(self._frame)

    def to_frame(self) -> pd.DataFrame:
        """Copy of the joined frame (for statistics and display)."""
        return self._frame.copy()

    def find(self, query: CatalogQuery) -> list[Product]:
        try:
            frame = self._frame
            mask = pd.Series(True, index=frame.index)

            criteria = query.criteria
            if criteria is not None:
                for condition in criteria.all_of:
                    mask &= self._condition_mask(frame, condition)
                if criteria.any_of:
                    any_mask = pd.Series(False, index=frame.index)
                    for condition in criteria.any_of:
                        any_mask |= self._condition_mask(frame, condition)
                    mask &= any_mask

            if query.brand_pattern is not None:
                mask &= self._regex_mask(frame["brand_name"], query.brand_pattern)

            result = frame[mask]

            sort_keys = [key for key in query.sort if key.field in result.columns]
            if sort_keys and not result.empty:
                result = result.sort_values(
                    by=[key.field for key in sort_keys],
                    ascending=[not key.descending for key in sort_keys],
                    kind="mergesort",  # stable: ties keep catalog order
                    na_position="last",
                )

            if query.limit is not None:
                result = result.head(query.limit)

            return [self._to_product(row) for row in result.to_dict("records")]

        except re.error as e:
            raise CatalogError(f"Invalid pattern in catalog query: {e}") from e
        except (KeyError, TypeError, ValueError) as e:
            raise CatalogError(f"Catalog query failed: {type(e).__name__}: {e}") from e

    # === Mask Building ===

    def _condition_mask(self, frame: pd.DataFrame, condition: FieldCondition) -> pd.Series:
        """Boolean mask for one condition; a missing column matches nothing."""
        if condition.field not in frame.columns:
            return pd.Series(False, index=frame.index)

        column = frame[condition.field]

        if condition.op == "regex":
            return self._regex_mask(column, condition.value)
        if condition.op == "exists":
            return column.notna() & (column.astype(str).str.strip() != "")
        if condition.op in _COMPARISONS:
            numeric = pd.to_numeric(column, errors="coerce")
            return _COMPARISONS[condition.op](numeric, condition.value).astype(bool)

        raise CatalogError(f"Unsupported operator: {condition.op}")

    def _regex_mask(self, column: pd.Series, pattern: str) -> pd.Series:
        return column.fillna("").astype(str).str.contains(
            pattern, flags=re.IGNORECASE, regex=True
        )

    # === Row Conversion ===

    def _to_product(self, row: dict[str, Any]) -> Product:
        brand = None
        brand_name = _clean(row.get("brand_name"))
        if brand_name:
            brand = Brand(id=_clean(row.get("brand_id")), name=str(brand_name))

        variants = row.get("variants")
        if not isinstance(variants, list):
            variants = []

        metadata = {}
        for key, value in row.items():
            if key in PRODUCT_FIELDS or key in _JOIN_COLUMNS:
                continue
            value = _clean(value)
            if value is not None:
                metadata[key] = value

        return Product(
            id=_clean(row.get("id")),
            name=str(_clean(row.get("name")) or ""),
            price=_as_float(row.get("price")),
            stock=_as_int(row.get("stock")) or 0,
            rating=_as_float(row.get("rating")) or 0.0,
            sold=_as_int(row.get("sold")) or 0,
            brand=brand,
            storage=_as_int(row.get("storage")),
            ram=_as_int(row.get("ram")),
            battery=_as_int(row.get("battery")),
            chipset=_clean(row.get("chipset")),
            camera_rear=_clean(row.get("camera_rear")),
            camera_front=_clean(row.get("camera_front")),
            description=str(_clean(row.get("description")) or ""),
            variants=[v for v in variants if isinstance(v, dict)],
            created_at=_clean(row.get("created_at")),
            metadata=metadata,
        )
