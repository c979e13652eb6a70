"""
Result formatting for the search playground.

Turns a SearchResult into a pandas table for st.dataframe and a short
markdown summary that keeps the fallback contract visible: suggestions
are never presented as a match.
"""

from typing import Optional

import pandas as pd

from matching.context import Product, SearchResult

RESULT_COLUMNS = ["rank", "name", "brand", "price", "storage", "ram", "rating", "sold", "stock", "score"]


def format_price(price: Optional[float]) -> str:
    """
    Format a VND price for display.

    Examples:
    - 6000000 -> "6.000.000₫"
    - None -> "Liên hệ"
    """
    if price is None or pd.isna(price):
        return "Liên hệ"
    return f"{int(round(price)):,}₫".replace(",", ".")


def product_row(rank: int, product: Product) -> dict:
    return {
        "rank": rank,
        "name": product.name,
        "brand": product.brand_name or None,
        "price": product.price,
        "storage": product.storage,
        "ram": product.ram,
        "rating": product.rating,
        "sold": product.sold,
        "stock": product.stock,
        "score": round(product.score, 1) if product.score is not None else None,
    }


def result_to_frame(result: SearchResult) -> pd.DataFrame:
    """One row per product, in result order; empty frame with headers if none."""
    rows = [product_row(i, p) for i, p in enumerate(result.products, 1)]
    return pd.DataFrame(rows, columns=RESULT_COLUMNS)


def summarize(result: SearchResult) -> str:
    """
    Markdown summary of a search result.

    Three cases, matching the result contract:
    - success: "Found N products (strategy)"
    - suggestions: the fallback message plus the suggestion count
    - total failure: the error message
    """
    info = result.search_info

    if result.is_total_failure:
        return f"⚠️ {result.message or 'Search failed'}\n\n`{result.error}`"

    if result.success:
        lines = [f"Found **{len(result.products)}** products using `{info.strategy}`."]
    else:
        lines = [result.message or "No matching products."]
        if result.products:
            lines.append(f"Showing **{len(result.products)}** popular products instead.")

    extracted = {k: v for k, v in info.extracted_info.items() if v is not None}
    if extracted:
        parts = ", ".join(f"{k}={v}" for k, v in extracted.items())
        lines.append(f"Understood: {parts}")
    if info.features:
        lines.append(f"Features: {', '.join(info.features)}")

    return "\n\n".join(lines)
