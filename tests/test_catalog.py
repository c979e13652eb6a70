"""
Tests for the pandas catalog and the file loader.

Run with: pytest tests/test_catalog.py -v
"""

import json
from datetime import datetime

import pandas as pd
import pytest

from catalog.base import CatalogError, CatalogQuery, SortKey
from catalog.frame import DataFrameCatalog
from catalog.loader import load_catalog, get_catalog_statistics, parse_variants
from matching.context import Brand, FieldCondition, Product, SearchCriteria


def names(products):
    return [p.name for p in products]


class TestFind:
    """Test masks, joins, sorting and limits."""

    def test_no_criteria_returns_everything(self, catalog):
        assert len(catalog.find(CatalogQuery())) == len(catalog) == 8

    def test_regex_is_case_insensitive(self, catalog):
        criteria = SearchCriteria(any_of=[FieldCondition("name", "regex", "galaxy")])
        assert names(catalog.find(CatalogQuery(criteria=criteria))) == [
            "Samsung Galaxy A51 128GB",
            "Samsung Galaxy S24 Ultra 512GB",
        ]

    def test_any_of_is_or(self, catalog):
        criteria = SearchCriteria(any_of=[
            FieldCondition("name", "regex", "a51"),
            FieldCondition("name", "regex", "reno"),
        ])
        assert len(catalog.find(CatalogQuery(criteria=criteria))) == 2

    def test_all_of_is_and(self, catalog):
        criteria = SearchCriteria(
            any_of=[FieldCondition("name", "regex", "iphone")],
            all_of=[FieldCondition("storage", "eq", 256)],
        )
        assert names(catalog.find(CatalogQuery(criteria=criteria))) == ["iPhone 15 Pro Max 256GB"]

    def test_numeric_comparisons(self, catalog):
        cheap = SearchCriteria(all_of=[FieldCondition("price", "lt", 7_000_000)])
        assert {p.id for p in catalog.find(CatalogQuery(criteria=cheap))} == {4, 8}

        big_battery = SearchCriteria(all_of=[FieldCondition("battery", "gte", 5000)])
        assert {p.id for p in catalog.find(CatalogQuery(criteria=big_battery))} == {5, 6, 7}

        pricey = SearchCriteria(all_of=[FieldCondition("price", "gt", 30_000_000)])
        assert {p.id for p in catalog.find(CatalogQuery(criteria=pricey))} == {2, 6}

    def test_exists(self, catalog):
        criteria = SearchCriteria(any_of=[FieldCondition("camera_rear", "exists")])
        assert {p.id for p in catalog.find(CatalogQuery(criteria=criteria))} == {1, 2}

    def test_missing_column_matches_nothing(self, catalog):
        criteria = SearchCriteria(any_of=[FieldCondition("color", "regex", "black")])
        assert catalog.find(CatalogQuery(criteria=criteria)) == []

    def test_brand_pattern_uses_join(self, catalog):
        found = catalog.find(CatalogQuery(brand_pattern="samsung"))
        assert {p.id for p in found} == {4, 6}
        assert all(p.brand_name == "Samsung" for p in found)

    def test_brand_pattern_drops_unbranded(self, product_records, brand_records):
        product_records.append({"id": 99, "name": "Unknown Phone", "brand_id": 42})
        catalog = DataFrameCatalog.from_records(product_records, brand_records)
        found = catalog.find(CatalogQuery(brand_pattern="."))
        assert 99 not in {p.id for p in found}

    def test_join_key_ignores_number_type(self):
        catalog = DataFrameCatalog.from_records(
            [{"id": 1, "name": "Galaxy A51", "brand_id": "2"}],
            brands=[{"id": 2.0, "name": "Samsung"}],
        )
        assert catalog.find(CatalogQuery())[0].brand == Brand(id="2", name="Samsung")

    def test_brands_table_replaces_existing_brand_name(self):
        catalog = DataFrameCatalog.from_records(
            [{"id": 1, "name": "Galaxy A51", "brand_id": 2, "brand_name": "samsung vn"}],
            brands=[{"id": 2, "name": "Samsung"}],
        )

        assert "brand_name" in catalog.to_frame().columns
        found = catalog.find(CatalogQuery(brand_pattern="Samsung"))
        assert [p.brand_name for p in found] == ["Samsung"]
        assert get_catalog_statistics(catalog)["by_brand"] == {"Samsung": 1}

    def test_sort_descending_and_limit(self, catalog):
        found = catalog.find(CatalogQuery(sort=(SortKey("sold"),), limit=3))
        assert [p.sold for p in found] == [1000, 900, 800]

    def test_sort_ascending(self, catalog):
        found = catalog.find(CatalogQuery(sort=(SortKey("price", descending=False),), limit=1))
        assert found[0].price == 5_990_000

    def test_sort_is_stable(self):
        catalog = DataFrameCatalog.from_records([
            {"id": i, "name": f"Phone {i}", "rating": 4.0} for i in range(1, 6)
        ])
        found = catalog.find(CatalogQuery(sort=(SortKey("rating"),)))
        assert [p.id for p in found] == [1, 2, 3, 4, 5]

    def test_missing_sort_column_is_ignored(self, catalog):
        found = catalog.find(CatalogQuery(sort=(SortKey("popularity"),)))
        assert [p.id for p in found] == list(range(1, 9))

    def test_invalid_regex_raises_catalog_error(self, catalog):
        criteria = SearchCriteria(any_of=[FieldCondition("name", "regex", "(")])
        with pytest.raises(CatalogError):
            catalog.find(CatalogQuery(criteria=criteria))

    def test_unsupported_operator(self, catalog):
        criteria = SearchCriteria(all_of=[FieldCondition("price", "between", (1, 2))])
        with pytest.raises(CatalogError):
            catalog.find(CatalogQuery(criteria=criteria))

    def test_empty_catalog(self, empty_catalog):
        assert len(empty_catalog) == 0
        assert empty_catalog.find(CatalogQuery(sort=(SortKey("sold"),), limit=10)) == []


class TestRowConversion:
    """Test DataFrame rows -> Product."""

    def test_product_fields(self, catalog):
        criteria = SearchCriteria(any_of=[FieldCondition("name", "regex", "s24")])
        product = catalog.find(CatalogQuery(criteria=criteria))[0]

        assert isinstance(product, Product)
        assert product.id == 6
        assert product.brand == Brand(id=2, name="Samsung")
        assert product.price == 33_990_000
        assert product.storage == 512
        assert product.ram == 12
        assert product.stock == 0
        assert product.camera_rear is None
        assert product.created_at == datetime(2024, 1, 31)
        assert product.score is None

    def test_variants_kept_as_list(self, catalog):
        product = catalog.find(CatalogQuery(limit=1))[0]
        assert product.variants[0] == {"storage": 256, "price": 29_990_000}

    def test_non_dict_variants_dropped(self):
        catalog = DataFrameCatalog.from_records(
            [{"id": 1, "name": "Galaxy A51", "variants": [256, {"storage": 128}, "x"]}]
        )
        assert catalog.find(CatalogQuery())[0].variants == [{"storage": 128}]

    def test_missing_numbers_default(self, catalog):
        criteria = SearchCriteria(any_of=[FieldCondition("name", "regex", "airpods")])
        product = catalog.find(CatalogQuery(criteria=criteria))[0]
        assert product.storage is None
        assert product.ram is None
        assert product.variants == []

    def test_unknown_columns_go_to_metadata(self):
        catalog = DataFrameCatalog.from_records([{"id": 1, "name": "Galaxy A51", "color": "Black"}])
        product = catalog.find(CatalogQuery())[0]
        assert product.get("color") == "Black"
        assert "brand_name" not in product.metadata

    def test_find_does_not_mutate_catalog(self, catalog):
        before = catalog.to_frame()
        found = catalog.find(CatalogQuery(limit=3))
        found[0].name = "changed"
        pd.testing.assert_frame_equal(before, catalog.to_frame())


class TestParseVariants:

    def test_json_list(self):
        assert parse_variants('[{"storage": 256, "price": 1}]') == [{"storage": 256, "price": 1}]

    def test_single_object(self):
        assert parse_variants('{"storage": 128}') == [{"storage": 128}]

    @pytest.mark.parametrize("raw", [None, float("nan"), "", "not json", "[1, 2]", "42"])
    def test_unreadable(self, raw):
        assert parse_variants(raw) == []


class TestLoadCatalog:
    """Test loading exports from disk."""

    @pytest.fixture
    def products_csv(self, tmp_path):
        path = tmp_path / "products.csv"
        pd.DataFrame([
            {"_id": 10, "Name": "iPhone 15 128GB", "Brand": "Apple", "Price": 19_990_000,
             "Storage": 128, "Stock": 4, "Variants": json.dumps([{"storage": 256}])},
            {"_id": 11, "Name": "Galaxy A51", "Brand": "Samsung", "Price": 6_000_000,
             "Storage": 128, "Stock": 0, "Variants": ""},
            {"_id": 12, "Name": None, "Brand": "Samsung", "Price": 1, "Storage": 64,
             "Stock": 1, "Variants": ""},
        ]).to_csv(path, index=False)
        return path

    def test_load_csv_with_brand_column(self, products_csv):
        catalog = load_catalog(str(products_csv))

        assert len(catalog) == 2  # row without a name is skipped
        found = catalog.find(CatalogQuery(brand_pattern="apple"))
        assert names(found) == ["iPhone 15 128GB"]
        assert found[0].id == 10
        assert found[0].variants == [{"storage": 256}]

    def test_load_with_brands_file(self, tmp_path):
        products = tmp_path / "products.csv"
        brands = tmp_path / "brands.csv"
        pd.DataFrame([
            {"_id": 1, "name": "Redmi Note 13", "brand": 3, "price": 4_990_000},
        ]).to_csv(products, index=False)
        pd.DataFrame([{"_id": 3, "name": "Xiaomi"}]).to_csv(brands, index=False)

        catalog = load_catalog(str(products), str(brands))
        product = catalog.find(CatalogQuery(brand_pattern="xiaomi"))[0]
        assert product.brand_name == "Xiaomi"

    def test_load_excel(self, tmp_path):
        path = tmp_path / "products.xlsx"
        pd.DataFrame([{"Name": "OPPO Reno11 F", "Brand": "Oppo", "Price": 8_990_000}]).to_excel(
            path, index=False
        )
        catalog = load_catalog(str(path))
        product = catalog.find(CatalogQuery())[0]
        assert product.id == 1  # generated
        assert product.brand_name == "Oppo"

    def test_unsupported_file_type(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text("[]")
        with pytest.raises(ValueError):
            load_catalog(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_catalog(str(tmp_path / "missing.csv"))

    def test_statistics(self, products_csv):
        stats = get_catalog_statistics(load_catalog(str(products_csv)))
        assert stats["total"] == 2
        assert stats["by_brand"] == {"Apple": 1, "Samsung": 1}
        assert stats["in_stock"] == 1
        assert stats["out_of_stock"] == 1
        assert stats["with_variants"] == 1


class TestStatistics:

    def test_sample_catalog(self, catalog):
        stats = get_catalog_statistics(catalog)
        assert stats["total"] == 8
        assert stats["by_brand"]["Apple"] == 4
        assert stats["in_stock"] == 7

    def test_empty_catalog(self, empty_catalog):
        assert get_catalog_statistics(empty_catalog)["total"] == 0
