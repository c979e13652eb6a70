"""
Shared fixtures: a small phone catalog covering every strategy.
"""

import pytest

from catalog.frame import DataFrameCatalog


BRANDS = [
    {"id": 1, "name": "Apple"},
    {"id": 2, "name": "Samsung"},
    {"id": 3, "name": "Xiaomi"},
    {"id": 4, "name": "Oppo"},
]

PRODUCTS = [
    {
        "id": 1, "name": "iPhone 15 Pro Max 256GB", "brand_id": 1,
        "price": 29_990_000, "storage": 256, "ram": 8, "rating": 4.8,
        "sold": 500, "stock": 10, "chipset": "A17 Pro", "camera_rear": "48MP",
        "description": "Titan, chip A17 Pro", "created_at": "2024-09-20",
        "variants": [{"storage": 256, "price": 29_990_000}, {"storage": 512, "price": 35_990_000}],
    },
    {
        "id": 2, "name": "iPhone 15 Pro Max 512GB", "brand_id": 1,
        "price": 35_990_000, "storage": 512, "ram": 8, "rating": 4.7,
        "sold": 120, "stock": 3, "chipset": "A17 Pro", "camera_rear": "48MP",
        "description": "Titan, chip A17 Pro", "created_at": "2024-09-21",
    },
    {
        "id": 3, "name": "iPhone 15 128GB", "brand_id": 1,
        "price": 19_990_000, "storage": 128, "ram": 6, "rating": 4.6,
        "sold": 800, "stock": 20, "chipset": "A16 Bionic",
        "description": "Dynamic Island", "created_at": "2023-09-22",
    },
    {
        "id": 4, "name": "Samsung Galaxy A51 128GB", "brand_id": 2,
        "price": 6_000_000, "storage": 128, "ram": 6, "rating": 4.2,
        "sold": 300, "stock": 5, "battery": 4000,
        "description": "Man hinh Super AMOLED", "created_at": "2020-01-10",
    },
    {
        "id": 5, "name": "Xiaomi Redmi Note 13 Pro 256GB", "brand_id": 3,
        "price": 7_490_000, "storage": 256, "ram": 8, "rating": 4.5,
        "sold": 900, "stock": 15, "chipset": "Helio G99", "battery": 5000,
        "description": "Camera 200MP, sac nhanh 67W", "created_at": "2024-01-15",
    },
    {
        "id": 6, "name": "Samsung Galaxy S24 Ultra 512GB", "brand_id": 2,
        "price": 33_990_000, "storage": 512, "ram": 12, "rating": 4.9,
        "sold": 250, "stock": 0, "chipset": "Snapdragon 8 Gen 3", "battery": 5000,
        "description": "Galaxy AI, S Pen", "created_at": "2024-01-31",
    },
    {
        "id": 7, "name": "OPPO Reno11 F 256GB", "brand_id": 4,
        "price": 8_990_000, "storage": 256, "ram": 8, "rating": 4.0,
        "sold": 150, "stock": 7, "chipset": "Dimensity 7050", "battery": 5000,
        "description": "Chuyen gia chan dung", "created_at": "2024-03-01",
    },
    {
        "id": 8, "name": "Tai nghe AirPods Pro 2", "brand_id": 1,
        "price": 5_990_000, "rating": 4.7, "sold": 1000, "stock": 30,
        "description": "Chong on chu dong", "created_at": "2023-09-22",
    },
]


@pytest.fixture
def product_records():
    """Raw product dicts (copies, safe to modify)."""
    return [dict(p) for p in PRODUCTS]


@pytest.fixture
def brand_records():
    return [dict(b) for b in BRANDS]


@pytest.fixture
def catalog(product_records, brand_records):
    """DataFrameCatalog over the sample phones."""
    return DataFrameCatalog.from_records(product_records, brand_records)


@pytest.fixture
def empty_catalog():
    return DataFrameCatalog.from_records([])
