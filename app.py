"""
Phone Store Search - Streamlit playground for the matching engine

Run with: streamlit run app.py

Architecture:
- This file: Streamlit UI only
- matching/: Normalizer, extractor, strategies, scorer, orchestrator
- catalog/: pandas catalog and Excel/CSV loader
- vocab/: Static pattern and alias tables
- ui/: Result tables and summaries
"""

import streamlit as st

from catalog.loader import load_catalog, get_catalog_statistics
from matching.search import ProductSearchService, SearchConfig
from matching.structured_logging import setup_logging, get_logger
from ui.results import format_price, result_to_frame, summarize


# =============================================================================
# CONFIGURATION
# =============================================================================

DEBUG_MODE = True  # Show strategy trace under each result

DEFAULT_PRODUCTS_PATH = "data/products.xlsx"

setup_logging(
    log_dir="logs",
    console_level=20,  # INFO
    file_level=10,     # DEBUG
    enable_console=True,
    enable_file=True,
    enable_error_log=True,
)
app_logger = get_logger("app")

st.set_page_config(
    page_title="Phone Store Search",
    page_icon="📱",
    layout="wide"
)


# =============================================================================
# COMPONENT INITIALIZATION
# =============================================================================

@st.cache_resource
def load_service(products_path: str, brands_path: str):
    """Load the catalog and build the search service (cached)."""
    try:
        catalog = load_catalog(products_path, brands_path or None)
        stats = get_catalog_statistics(catalog)
        return ProductSearchService(catalog, SearchConfig()), stats, None
    except FileNotFoundError as e:
        return None, {}, f"File not found: {e.filename or products_path}"
    except Exception as e:
        app_logger.error(f"Catalog load failed: {e}", exc_info=True)
        return None, {}, f"Error loading catalog: {str(e)}"


# =============================================================================
# MAIN APPLICATION
# =============================================================================

def main():
    st.title("📱 Phone Store Search")
    st.markdown("*Type a question the way a customer would, with or without diacritics*")

    # Sidebar - Configuration
    with st.sidebar:
        st.header("⚙️ Configuration")
        products_path = st.text_input(
            "📁 Products file",
            value=DEFAULT_PRODUCTS_PATH,
            help="Excel or CSV export of the products collection"
        )
        brands_path = st.text_input(
            "🏷️ Brands file (optional)",
            value="",
            help="Leave empty when the products file has a brand column"
        )
        st.markdown("---")

    service, stats, error = load_service(products_path, brands_path)

    if error:
        st.error(f"❌ {error}")
        st.stop()

    if not stats.get('total'):
        st.warning("⚠️ No products loaded. Check the products file.")
        st.stop()

    # Sidebar - Catalog statistics
    with st.sidebar:
        st.header("📦 Catalog")
        st.metric("Total Products", stats['total'])

        col1, col2 = st.columns(2)
        with col1:
            st.metric("In Stock", stats['in_stock'])
        with col2:
            st.metric("With Variants", stats['with_variants'])

        with st.expander("📊 Brands"):
            for brand, count in sorted(stats['by_brand'].items(), key=lambda x: x[1], reverse=True)[:10]:
                st.write(f"• **{brand}:** {count}")

    query = st.text_input("🔎 Search", placeholder="iphone 15 pro max 256gb")
    if not query:
        return

    result = service.search(query, debug=DEBUG_MODE)

    if result.is_total_failure:
        st.error(summarize(result))
        return
    if result.success:
        st.success(summarize(result))
    else:
        st.info(summarize(result))

    if result.products:
        frame = result_to_frame(result)
        frame["price"] = frame["price"].map(format_price)
        st.dataframe(frame, hide_index=True, use_container_width=True)

    # Debug info
    if DEBUG_MODE:
        with st.expander("🔍 Debug Info"):
            st.write(f"**Normalized:** `{result.search_info.normalized_query}`")
            st.json(result.search_info.extracted_info)
            for attempt in result.search_info.trace:
                line = f"• `{attempt.strategy}`: {attempt.outcome} ({attempt.count})"
                if attempt.error:
                    line += f" - {attempt.error}"
                st.write(line)


if __name__ == "__main__":
    main()
