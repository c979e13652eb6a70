"""
Relevance scoring for candidate products.

Additive point model over a strategy's candidate set. Only relative order
matters; scores are not normalized.
"""

from dataclasses import dataclass, replace
from typing import Optional

from matching.context import ExtractedInfo, Product


@dataclass
class ScoreWeights:
    """
    Points per signal.

    Attributes:
        full_query: Whole query (len > 2) appears in the name
        model: Extracted model appears in the name
        variant: Extracted variant appears in the name
        storage: Product storage equals extracted storage
        variant_storage: A sub-variant record has the extracted storage
        brand: Joined brand name contains the extracted brand
        model_phrase: Model tokens appear in order in the name
        rating_factor: Multiplier for rating
        sold_divisor: sold / sold_divisor, capped at sold_cap
        in_stock: stock > 0
    """
    full_query: float = 150
    model: float = 120
    variant: float = 60
    storage: float = 100
    variant_storage: float = 80
    brand: float = 70
    model_phrase: float = 30
    rating_factor: float = 5
    sold_divisor: float = 50
    sold_cap: float = 40
    in_stock: float = 20


class Scorer:
    """
    Ranks products by additive relevance score.

    Deterministic: the sort is stable, so equal scores keep catalog order.
    Inputs are never modified; scored copies are returned.

    Example:
        scorer = Scorer()
        ranked = scorer.score(products, "iphone 15 pro max", info)
        ranked[0].score  # highest
    """

    def __init__(self, weights: Optional[ScoreWeights] = None):
        self.weights = weights or ScoreWeights()

    def score(self, products: list[Product], query: str, info: ExtractedInfo) -> list[Product]:
        """
        Score and sort products, best first.

        Args:
            products: Candidates from one strategy
            query: Normalized query
            info: Extracted attributes

        Returns:
            Scored copies sorted by score descending
        """
        scored = [
            replace(product, score=self.score_one(product, query, info))
            for product in products
        ]
        return sorted(scored, key=lambda p: p.score, reverse=True)

    def score_one(self, product: Product, query: str, info: ExtractedInfo) -> float:
        """Score a single product."""
        w = self.weights
        name = (product.name or "").lower()
        q = (query or "").lower()
        score = 0.0

        if len(q) > 2 and q in name:
            score += w.full_query

        model = info.model.lower() if info.model else ""
        if model and model in name:
            score += w.model

        if info.variant and info.variant.lower() in name:
            score += w.variant

        if info.storage:
            if product.storage == info.storage:
                score += w.storage
            if _has_variant_storage(product, info.storage):
                score += w.variant_storage

        if info.brand and info.brand.lower() in product.brand_name.lower():
            score += w.brand

        score += (product.rating or 0) * w.rating_factor
        score += min((product.sold or 0) / w.sold_divisor, w.sold_cap)

        if product.stock and product.stock > 0:
            score += w.in_stock

        # Model tokens in order ("note 13" in "redmi note 13 pro")
        tokens = model.split()
        if tokens and " ".join(tokens) in name:
            score += w.model_phrase

        return score


def _has_variant_storage(product: Product, storage: int) -> bool:
    for variant in product.variants:
        if not isinstance(variant, dict):
            continue
        try:
            if float(variant.get("storage")) == storage:
                return True
        except (TypeError, ValueError):
            continue
    return False
