"""
Tests for relevance scoring.

Run with: pytest tests/test_scorer.py -v
"""

from dataclasses import replace

import pytest
from matching.scorer import Scorer, ScoreWeights
from matching.context import Brand, ExtractedInfo, Product


@pytest.fixture
def scorer():
    return Scorer()


@pytest.fixture
def iphone():
    return Product(
        id=1,
        name="iPhone 15 Pro Max 256GB",
        price=29_990_000,
        stock=10,
        rating=4.8,
        sold=500,
        brand=Brand(1, "Apple"),
        storage=256,
        variants=[{"storage": 256, "price": 29_990_000}],
    )


@pytest.fixture
def info():
    return ExtractedInfo(brand="Apple", model="15", variant="pro max", storage=256)


class TestSignals:
    """Test each signal's points."""

    def test_all_signals(self, scorer, iphone, info):
        score = scorer.score_one(iphone, "iphone 15 pro max 256gb", info)
        # 150 + 120 + 60 + 100 + 80 + 70 + 30 + 4.8*5 + 500/50 + 20
        assert score == pytest.approx(664)

    def test_bare_product_scores_zero(self, scorer):
        product = Product(id=1, name="Phone")
        assert scorer.score_one(product, "", ExtractedInfo()) == 0

    def test_short_query_ignored(self, scorer):
        product = Product(id=1, name="ip 14")
        assert scorer.score_one(product, "ip", ExtractedInfo()) == 0

    def test_popularity_is_capped(self, scorer):
        product = Product(id=1, name="Phone", sold=1_000_000)
        assert scorer.score_one(product, "", ExtractedInfo()) == 40

    def test_out_of_stock_gets_nothing(self, scorer):
        product = Product(id=1, name="Phone", stock=0)
        assert scorer.score_one(product, "", ExtractedInfo()) == 0

    def test_variant_level_storage(self, scorer):
        product = Product(id=1, name="Phone", storage=128, variants=[{"storage": "256"}, {"storage": None}])
        assert scorer.score_one(product, "", ExtractedInfo(storage=256)) == 80

    def test_non_dict_variants_ignored(self, scorer):
        product = Product(id=1, name="Phone", variants=[256, "256", None, {"storage": 256}])
        assert scorer.score_one(product, "", ExtractedInfo(storage=256)) == 80

    def test_brand_uses_joined_name(self, scorer):
        product = Product(id=1, name="Galaxy A51", brand=Brand(2, "Samsung"))
        assert scorer.score_one(product, "", ExtractedInfo(brand="Samsung")) == 70

    def test_name_compared_lowercased(self, scorer):
        product = Product(id=1, name="REDMI NOTE 13")
        score = scorer.score_one(product, "", ExtractedInfo(model="note 13"))
        assert score == 120 + 30

    def test_custom_weights(self):
        scorer = Scorer(ScoreWeights(in_stock=1000))
        assert scorer.score_one(Product(id=1, name="Phone", stock=1), "", ExtractedInfo()) == 1000


class TestRanking:
    """Test ordering and copy semantics."""

    def test_exact_storage_adds_exactly_100(self, scorer):
        info = ExtractedInfo(model="15", storage=256)
        base = Product(id=1, name="iPhone 15", storage=128, rating=4.0, sold=100, stock=1)
        matching = replace(base, id=2, storage=256)

        ranked = scorer.score([base, matching], "iphone 15", info)
        assert [p.id for p in ranked] == [2, 1]
        assert ranked[0].score - ranked[1].score == pytest.approx(100)

    def test_sorted_descending(self, scorer, info):
        products = [
            Product(id=1, name="Galaxy A51", rating=3.0),
            Product(id=2, name="iPhone 15 Pro Max", rating=4.0),
            Product(id=3, name="iPhone 15", rating=5.0),
        ]
        ranked = scorer.score(products, "iphone 15 pro max", info)
        scores = [p.score for p in ranked]
        assert scores == sorted(scores, reverse=True)
        assert ranked[0].id == 2

    def test_ties_keep_input_order(self, scorer):
        products = [Product(id=i, name="Same Phone") for i in range(5)]
        ranked = scorer.score(products, "", ExtractedInfo())
        assert [p.id for p in ranked] == [0, 1, 2, 3, 4]

    def test_inputs_not_modified(self, scorer, iphone, info):
        ranked = scorer.score([iphone], "iphone 15", info)
        assert iphone.score is None
        assert ranked[0] is not iphone
        assert ranked[0].score > 0

    def test_deterministic(self, scorer, info):
        products = [Product(id=i, name=f"iPhone {10 + i}", sold=i * 10) for i in range(6)]
        first = [p.id for p in scorer.score(products, "iphone 15", info)]
        second = [p.id for p in scorer.score(products, "iphone 15", info)]
        assert first == second

    def test_empty(self, scorer, info):
        assert scorer.score([], "iphone", info) == []
