"""
Catalog loader for phone store exports.

Loads the products sheet (and optionally a brands sheet) from Excel or CSV
and builds a DataFrameCatalog.

Architecture: keep every column, normalize the ones the engine reads.
- Columns listed in COLUMN_ALIASES are renamed to engine field names
- Unknown columns are kept and end up in Product.metadata
- Rows without a name are skipped and counted
"""

import json
from pathlib import Path
from typing import Any, Optional

import pandas as pd

from catalog.frame import DataFrameCatalog
from matching.structured_logging import get_logger, timed

# Module-level logger
_logger = get_logger("catalog.loader")


# =============================================================================
# COLUMN NORMALIZATION MAPPINGS
# =============================================================================
# Maps export column names to engine field names.
# Only fields the engine reads need aliases; others keep original names.

COLUMN_ALIASES = {
    # Identification
    '_id': 'id',
    'product_id': 'id',
    'Product ID': 'id',
    'Name': 'name',
    'Product Name': 'name',
    'Description': 'description',

    # Brand reference
    'brandId': 'brand_id',
    'Brand ID': 'brand_id',
    'Brand': 'brand',

    # Commercial fields
    'Price': 'price',
    'Stock': 'stock',
    'Rating': 'rating',
    'Sold': 'sold',
    'createdAt': 'created_at',
    'Created At': 'created_at',

    # Hardware specs
    'Storage': 'storage',
    'RAM': 'ram',
    'Ram': 'ram',
    'Battery': 'battery',
    'Chipset': 'chipset',
    'cameraRear': 'camera_rear',
    'Camera Rear': 'camera_rear',
    'cameraFront': 'camera_front',
    'Camera Front': 'camera_front',

    # Variants (JSON list of {storage, price, ...})
    'Variants': 'variants',
}

BRAND_COLUMN_ALIASES = {
    '_id': 'id',
    'brand_id': 'id',
    'Brand ID': 'id',
    'Name': 'name',
    'Brand': 'name',
}

SUPPORTED_SUFFIXES = ('.xlsx', '.xls', '.csv')


# =============================================================================
# PARSING HELPERS
# =============================================================================

def _read_table(path: str) -> pd.DataFrame:
    """Read an Excel or CSV file into a DataFrame."""
    suffix = Path(path).suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ValueError(
            f"Unsupported catalog file type: {suffix or path} "
            f"(expected one of {', '.join(SUPPORTED_SUFFIXES)})"
        )
    if suffix == '.csv':
        return pd.read_csv(path)
    return pd.read_excel(path)


def parse_variants(raw: Any) -> list[dict]:
    """
    Parse the variants cell.

    Exports store variants as a JSON list. Anything unreadable becomes an
    empty list; the product itself is still loaded.

    Examples:
    - '[{"storage": 256, "price": 25990000}]' -> [{"storage": 256, ...}]
    - '' or NaN -> []
    - 'not json' -> []
    """
    if isinstance(raw, list):
        return [v for v in raw if isinstance(v, dict)]
    if raw is None or (isinstance(raw, float) and pd.isna(raw)):
        return []

    text = str(raw).strip()
    if not text:
        return []

    try:
        parsed = json.loads(text)
    except ValueError:
        return []

    if isinstance(parsed, dict):
        parsed = [parsed]
    if not isinstance(parsed, list):
        return []
    return [v for v in parsed if isinstance(v, dict)]


def _brands_from_column(products: pd.DataFrame) -> Optional[pd.DataFrame]:
    """
    Derive a brands table from a free-text brand column.

    Replaces the text column with a brand_id reference so the catalog can
    join it the same way it joins a real brands file.
    """
    if 'brand' not in products.columns:
        return None

    names = products['brand'].map(lambda v: str(v).strip() if pd.notna(v) else None)
    unique = [n for n in dict.fromkeys(names) if n]

    brand_ids = {name: idx for idx, name in enumerate(unique, start=1)}
    products['brand_id'] = names.map(lambda n: brand_ids.get(n) if n else None)
    products.drop(columns=['brand'], inplace=True)

    return pd.DataFrame({'id': list(brand_ids.values()), 'name': list(brand_ids.keys())})


# =============================================================================
# MAIN LOADER
# =============================================================================

@timed("catalog_load")
def load_catalog(products_path: str, brands_path: Optional[str] = None) -> DataFrameCatalog:
    """
    Load a catalog from product (and brand) exports.

    Args:
        products_path: Products file (.xlsx, .xls or .csv)
        brands_path: Optional brands file with id and name columns.
                     Without it, a "brand" text column is used instead.

    Returns:
        DataFrameCatalog ready for ProductSearchService

    Raises:
        ValueError: Unsupported file type or no name column
        FileNotFoundError: A file does not exist
    """
    _logger.info(f"Loading products from: {products_path}")

    df = _read_table(products_path).rename(columns=COLUMN_ALIASES)
    total_rows = len(df)

    if 'name' not in df.columns:
        raise ValueError(f"Products file has no name column: {products_path}")

    # Skip rows without a name
    has_name = df['name'].notna() & (df['name'].astype(str).str.strip() != '')
    skipped = int((~has_name).sum())
    df = df[has_name].reset_index(drop=True)
    df['name'] = df['name'].astype(str).str.strip()

    # Generate ids where the export has none
    if 'id' not in df.columns:
        df['id'] = range(1, len(df) + 1)
    else:
        missing = df['id'].isna()
        if missing.any():
            df['id'] = df['id'].astype(object)
            df.loc[missing, 'id'] = [f"row-{i}" for i in df.index[missing]]

    if 'variants' in df.columns:
        df['variants'] = df['variants'].map(parse_variants)

    if brands_path:
        brands = _read_table(brands_path).rename(columns=BRAND_COLUMN_ALIASES)
        if 'brand' in df.columns and 'brand_id' not in df.columns:
            df = df.rename(columns={'brand': 'brand_id'})
    elif 'brand_id' not in df.columns:
        brands = _brands_from_column(df)
    else:
        brands = None

    catalog = DataFrameCatalog(df, brands)

    _logger.info(
        f"Loaded {len(catalog)} products ({total_rows} rows)",
        extra={"event": "catalog_loaded", "result_count": len(catalog)}
    )
    if skipped > 0:
        _logger.warning(
            f"Skipped {skipped} rows without a product name",
            extra={"event": "catalog_rows_skipped", "result_count": skipped}
        )

    return catalog


def get_catalog_statistics(catalog: DataFrameCatalog) -> dict:
    """
    Get statistics about a loaded catalog.

    Returns dict with:
    - total: Total product count
    - by_brand: Count by brand name ("Unknown" when not joined)
    - in_stock: Products with stock > 0
    - out_of_stock: Products with no stock
    - with_variants: Products carrying variant records
    """
    frame = catalog.to_frame()
    stats = {
        'total': len(frame),
        'by_brand': {},
        'in_stock': 0,
        'out_of_stock': 0,
        'with_variants': 0,
    }

    if frame.empty:
        return stats

    brands = frame['brand_name'].where(frame['brand_name'].notna(), 'Unknown')
    stats['by_brand'] = {str(k): int(v) for k, v in brands.value_counts().items()}

    if 'stock' in frame.columns:
        in_stock = int((frame['stock'].fillna(0) > 0).sum())
    else:
        in_stock = 0
    stats['in_stock'] = in_stock
    stats['out_of_stock'] = len(frame) - in_stock

    if 'variants' in frame.columns:
        stats['with_variants'] = int(
            frame['variants'].map(lambda v: isinstance(v, list) and len(v) > 0).sum()
        )

    return stats
