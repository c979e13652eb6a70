"""
Search strategies for product matching.

Five tactics tried in a fixed order, each looser than the one before:
- ExactModel: name patterns built from brand/model/variant, storage as a filter
- BrandBased: every product of the extracted brand
- FeatureBased: coarse numeric filters from feature keywords (cheap, gaming, ...)
- FuzzyToken: query tokens in order anywhere in name or description
- FallbackPopular: best sellers, never reported as a match

Every strategy has a name and attempt(query) -> StrategyResult. A strategy
that cannot run, or finds nothing, declines with success=False. Catalog
and criteria errors are caught here and recorded on the result, so one
failing strategy never stops the cascade.
"""

import re
from typing import Optional, TYPE_CHECKING

from catalog.base import Catalog, CatalogQuery, SortKey
from matching.context import (
    FieldCondition,
    Product,
    SearchCriteria,
    SearchQuery,
    StrategyName,
    StrategyResult,
)
from matching.criteria import (
    CriteriaBuilder,
    escape_fragment,
    ordered_token_pattern,
    storage_constraint,
)
from matching.scorer import Scorer
from matching.structured_logging import get_logger
from vocab.patterns import HIGH_END_CHIPSET_PATTERN

if TYPE_CHECKING:
    from matching.search import SearchConfig

# Module-level logger
_logger = get_logger("matching.strategies")

FALLBACK_MESSAGE = (
    "Không tìm thấy sản phẩm phù hợp. "
    "Dưới đây là một số sản phẩm bán chạy bạn có thể quan tâm."
)
NO_MATCH_MESSAGE = (
    "Không tìm thấy sản phẩm phù hợp. "
    "Bạn thử miêu tả thêm (dung lượng, màu, hãng) nhé."
)


def _failed(strategy: StrategyName, error: Exception) -> StrategyResult:
    """Log a strategy failure and turn it into a decline."""
    _logger.warning(
        f"{strategy.value} failed: {type(error).__name__}: {error}",
        extra={
            "event": "strategy_error",
            "strategy": strategy.value,
            "error_type": type(error).__name__,
        },
        exc_info=True,
    )
    return StrategyResult.declined(strategy, error=str(error))


class ExactModelStrategy:
    """
    Precise match on brand, model, variant and storage.

    Primary query: name patterns from CriteriaBuilder, newest first.
    Retry (nothing found and a brand is known): products of that brand
    with the same storage, filtered in memory by the model tokens.
    """

    name = StrategyName.EXACT_MODEL

    def __init__(
        self,
        catalog: Catalog,
        config: "SearchConfig",
        scorer: Optional[Scorer] = None,
        builder: Optional[CriteriaBuilder] = None,
    ):
        self.catalog = catalog
        self.config = config
        self.scorer = scorer or Scorer()
        self.builder = builder or CriteriaBuilder()

    def attempt(self, query: SearchQuery) -> StrategyResult:
        info = query.info
        if not info.has_signal():
            return StrategyResult.declined(self.name)

        try:
            criteria = self.builder.build(info)

            products: list[Product] = []
            if criteria.any_of:
                products = self.catalog.find(CatalogQuery(
                    criteria=criteria,
                    sort=(SortKey("created_at"),),
                    limit=self.config.exact_limit,
                ))

            if not products and info.brand:
                products = self._brand_retry(query)

            if not products:
                return StrategyResult.declined(self.name)

            ranked = self.scorer.score(products, query.normalized, info)
            return StrategyResult(
                success=True,
                products=ranked[:self.config.max_results],
                strategy=self.name,
                extracted_info=info,
            )
        except Exception as e:
            return _failed(self.name, e)

    def _brand_retry(self, query: SearchQuery) -> list[Product]:
        """Brand-joined scan, same storage, model tokens checked per name."""
        info = query.info
        criteria = None
        if info.storage:
            criteria = SearchCriteria(all_of=[storage_constraint(info.storage)])

        products = self.catalog.find(CatalogQuery(
            criteria=criteria,
            brand_pattern=escape_fragment(info.brand),
            limit=self.config.brand_limit,
        ))

        model_pattern = ordered_token_pattern(info.model.split()) if info.model else None
        if model_pattern is None:
            return products

        model_regex = re.compile(model_pattern, re.IGNORECASE)
        return [p for p in products if model_regex.search(p.name or "")]


class BrandBasedStrategy:
    """Every product whose joined brand name matches the extracted brand."""

    name = StrategyName.BRAND_BASED

    def __init__(self, catalog: Catalog, config: "SearchConfig", scorer: Optional[Scorer] = None):
        self.catalog = catalog
        self.config = config
        self.scorer = scorer or Scorer()

    def attempt(self, query: SearchQuery) -> StrategyResult:
        info = query.info
        if not info.brand:
            return StrategyResult.declined(self.name)

        try:
            products = self.catalog.find(CatalogQuery(
                brand_pattern=escape_fragment(info.brand),
                limit=self.config.brand_limit,
            ))
            if not products:
                return StrategyResult.declined(self.name)

            ranked = self.scorer.score(products, query.normalized, info)
            return StrategyResult(
                success=True,
                products=ranked[:self.config.max_results],
                strategy=self.name,
                extracted_info=info,
            )
        except Exception as e:
            return _failed(self.name, e)


class FeatureBasedStrategy:
    """
    Coarse filters from feature keywords, best rated first.

    price and premium are ANDed price bounds (premium wins when both are
    present). gaming, camera, battery and ram add OR clauses. No scoring:
    results keep the catalog's rating order.
    """

    name = StrategyName.FEATURE_BASED

    def __init__(self, catalog: Catalog, config: "SearchConfig"):
        self.catalog = catalog
        self.config = config

    def build_criteria(self, features: tuple[str, ...]) -> SearchCriteria:
        """Map detected features to catalog conditions."""
        cfg = self.config
        criteria = SearchCriteria()

        if "premium" in features:
            criteria.all_of.append(FieldCondition("price", "gt", cfg.premium_threshold))
        elif "price" in features:
            criteria.all_of.append(FieldCondition("price", "lt", cfg.budget_threshold))

        if "gaming" in features:
            criteria.any_of.append(FieldCondition("ram", "gte", cfg.gaming_min_ram))
            criteria.any_of.append(FieldCondition("chipset", "regex", HIGH_END_CHIPSET_PATTERN))
        if "camera" in features:
            criteria.any_of.append(FieldCondition("camera_rear", "exists"))
            criteria.any_of.append(FieldCondition("camera_front", "exists"))
        if "battery" in features:
            criteria.any_of.append(FieldCondition("battery", "gte", cfg.min_battery))
        if "ram" in features:
            criteria.any_of.append(FieldCondition("ram", "gte", cfg.min_ram))

        return criteria

    def attempt(self, query: SearchQuery) -> StrategyResult:
        if not query.features:
            return StrategyResult.declined(self.name)

        try:
            criteria = self.build_criteria(query.features)
            if criteria.is_empty():
                return StrategyResult.declined(self.name)

            products = self.catalog.find(CatalogQuery(
                criteria=criteria,
                sort=(SortKey("rating"),),
                limit=self.config.feature_limit,
            ))
            if not products:
                return StrategyResult.declined(self.name)

            return StrategyResult(
                success=True,
                products=products[:self.config.max_results],
                strategy=self.name,
                extracted_info=query.info,
                features=list(query.features),
            )
        except Exception as e:
            return _failed(self.name, e)


class FuzzyTokenStrategy:
    """
    Loose ordered-token match over name and description.

    Model tokens come first, then up to fuzzy_max_other_tokens other query
    tokens in query order, all joined with ".*".
    """

    name = StrategyName.FUZZY_TOKEN

    def __init__(self, catalog: Catalog, config: "SearchConfig", scorer: Optional[Scorer] = None):
        self.catalog = catalog
        self.config = config
        self.scorer = scorer or Scorer()

    def tokens(self, query: SearchQuery) -> list[str]:
        """Pattern tokens: model tokens, then other query tokens."""
        model_tokens = query.info.model.lower().split() if query.info.model else []
        query_tokens = [t for t in query.normalized.split() if len(t) > 1]
        other = [t for t in query_tokens if t not in model_tokens]
        return model_tokens + other[:self.config.fuzzy_max_other_tokens]

    def attempt(self, query: SearchQuery) -> StrategyResult:
        try:
            pattern = ordered_token_pattern(self.tokens(query))
            if pattern is None:
                return StrategyResult.declined(self.name)

            criteria = SearchCriteria(any_of=[
                FieldCondition("name", "regex", pattern),
                FieldCondition("description", "regex", pattern),
            ])
            if query.info.storage:
                criteria.all_of.append(storage_constraint(query.info.storage))

            products = self.catalog.find(CatalogQuery(
                criteria=criteria,
                sort=(SortKey("rating"), SortKey("sold")),
                limit=self.config.fuzzy_limit,
            ))
            if not products:
                return StrategyResult.declined(self.name)

            ranked = self.scorer.score(products, query.normalized, query.info)
            return StrategyResult(
                success=True,
                products=ranked[:self.config.max_results],
                strategy=self.name,
                extracted_info=query.info,
            )
        except Exception as e:
            return _failed(self.name, e)


class FallbackPopularStrategy:
    """
    Best sellers when nothing matched.

    Always reports success=False, even with products: these are
    suggestions, and callers must present them as such.
    """

    name = StrategyName.FALLBACK_POPULAR

    def __init__(self, catalog: Catalog, config: "SearchConfig"):
        self.catalog = catalog
        self.config = config

    def attempt(self, query: SearchQuery) -> StrategyResult:
        try:
            products = self.catalog.find(CatalogQuery(
                sort=(SortKey("sold"), SortKey("rating")),
                limit=self.config.fallback_limit,
            ))
        except Exception as e:
            return _failed(self.name, e)

        return StrategyResult(
            success=False,
            products=products,
            strategy=self.name,
            extracted_info=query.info,
            message=FALLBACK_MESSAGE if products else NO_MATCH_MESSAGE,
        )
