"""
Product search orchestration.

Runs the strategy cascade for one query:
    ExactModel -> BrandBased -> FeatureBased -> FuzzyToken -> FallbackPopular

The first strategy that succeeds with products is surfaced and the rest
never run. When none succeeds the fallback's suggestions are surfaced with
success=False. Only a fallback that cannot read the catalog (or a bug
outside the strategies) produces a total failure, returned as data.
"""

from dataclasses import dataclass
from typing import Optional

from catalog.base import Catalog
from matching.context import (
    SearchInfo,
    SearchQuery,
    SearchResult,
    StrategyAttempt,
    StrategyName,
    StrategyResult,
)
from matching.extractor import EntityExtractor
from matching.features import FeatureDetector
from matching.normalize import normalize
from matching.scorer import Scorer
from matching.strategies import (
    ExactModelStrategy,
    BrandBasedStrategy,
    FeatureBasedStrategy,
    FuzzyTokenStrategy,
    FallbackPopularStrategy,
)
from matching.structured_logging import get_logger, log_error, log_search, log_strategy_attempt, Timer

# Module-level logger
_logger = get_logger("matching.search")

ERROR_MESSAGE = "Có lỗi khi tìm kiếm sản phẩm."


class SearchError(Exception):
    """Raised when the search service is misconfigured."""


@dataclass
class SearchConfig:
    """
    Configuration for search behavior.

    Attributes:
        exact_limit: Catalog cap for the ExactModel primary query
        brand_limit: Catalog cap for brand scans (ExactModel retry, BrandBased)
        feature_limit: Catalog cap for FeatureBased
        fuzzy_limit: Catalog cap for FuzzyToken
        fallback_limit: Number of popular products suggested
        max_results: Maximum results returned by a matching strategy
        budget_threshold: "price" feature upper bound (VND)
        premium_threshold: "premium" feature lower bound (VND)
        gaming_min_ram: "gaming" feature RAM floor (GB)
        min_battery: "battery" feature capacity floor (mAh)
        min_ram: "ram" feature RAM floor (GB)
        fuzzy_max_other_tokens: Non-model tokens added to the fuzzy pattern
    """
    exact_limit: int = 20
    brand_limit: int = 50
    feature_limit: int = 30
    fuzzy_limit: int = 50
    fallback_limit: int = 10
    max_results: int = 10
    budget_threshold: int = 10_000_000
    premium_threshold: int = 15_000_000
    gaming_min_ram: int = 8
    min_battery: int = 5000
    min_ram: int = 8
    fuzzy_max_other_tokens: int = 6


class ProductSearchService:
    """
    Entry point of the matching engine.

    Stateless apart from its collaborators, so one instance can serve
    concurrent calls.

    Example:
        service = ProductSearchService(load_catalog("data/products.xlsx"))
        result = service.search("iphone 15 pro max 256gb")
        if result.success:
            ...  # confident match
        elif result.products:
            ...  # suggestions, not an answer
    """

    def __init__(
        self,
        catalog: Catalog,
        config: Optional[SearchConfig] = None,
        extractor: Optional[EntityExtractor] = None,
        feature_detector: Optional[FeatureDetector] = None,
        scorer: Optional[Scorer] = None,
    ):
        """
        Initialize the service.

        Args:
            catalog: Read-only product catalog
            config: Search configuration (uses defaults if None)
            extractor: Entity extractor (default vocab tables if None)
            feature_detector: Feature keyword detector
            scorer: Relevance scorer shared by the ranking strategies

        Raises:
            SearchError: No catalog given
        """
        if catalog is None:
            raise SearchError("ProductSearchService needs a catalog")

        self.catalog = catalog
        self.config = config or SearchConfig()
        self.extractor = extractor or EntityExtractor()
        self.feature_detector = feature_detector or FeatureDetector()
        scorer = scorer or Scorer()

        self.strategies = [
            ExactModelStrategy(catalog, self.config, scorer),
            BrandBasedStrategy(catalog, self.config, scorer),
            FeatureBasedStrategy(catalog, self.config),
            FuzzyTokenStrategy(catalog, self.config, scorer),
        ]
        self.fallback = FallbackPopularStrategy(catalog, self.config)

    def prepare(self, raw_query: str) -> SearchQuery:
        """Normalize, extract and detect features once for all strategies."""
        normalized = normalize(raw_query)
        return SearchQuery(
            raw=raw_query if isinstance(raw_query, str) else "",
            normalized=normalized,
            info=self.extractor.extract(normalized),
            features=tuple(self.feature_detector.detect(normalized)),
        )

    def search(self, raw_query: str, debug: bool = False) -> SearchResult:
        """
        Run the strategy cascade.

        Args:
            raw_query: Customer text, any casing or diacritics
            debug: Record every strategy attempt in search_info.trace

        Returns:
            SearchResult (never raises)
        """
        original = raw_query if isinstance(raw_query, str) else ""
        trace: list[StrategyAttempt] = []
        query: Optional[SearchQuery] = None

        with Timer() as timer:
            try:
                query = self.prepare(raw_query)
                result = self._run_cascade(query, trace, debug)
            except Exception as e:
                log_error(e, context="search_cascade", query=original)
                result = self._total_failure(original, query, str(e), trace if debug else [])

        log_search(
            query=original,
            strategy=result.strategy,
            products_found=len(result.products),
            search_time_ms=timer.elapsed_ms,
            success=result.success,
            extracted_info=result.search_info.extracted_info,
            features=result.search_info.features,
            normalized_query=result.search_info.normalized_query,
        )
        return result

    def _run_cascade(
        self,
        query: SearchQuery,
        trace: list[StrategyAttempt],
        debug: bool,
    ) -> SearchResult:
        for strategy in self.strategies:
            try:
                outcome = strategy.attempt(query)
            except Exception as e:
                _logger.warning(f"Strategy {strategy.name.value} raised: {e}", exc_info=True)
                outcome = StrategyResult.declined(strategy.name, error=str(e))
            self._record(outcome, trace, debug)
            if outcome.success and outcome.products:
                return self._wrap(query, outcome, trace)

        fallback = self.fallback.attempt(query)
        self._record(fallback, trace, debug)

        if fallback.error is not None:
            return self._total_failure(query.raw, query, fallback.error, trace)

        return self._wrap(query, fallback, trace)

    def _record(self, outcome: StrategyResult, trace: list[StrategyAttempt], debug: bool) -> None:
        if outcome.error is not None:
            label = "error"
        elif outcome.success and outcome.products:
            label = "success"
        elif outcome.products:
            label = "suggested"
        else:
            label = "declined"

        log_strategy_attempt(
            outcome.strategy.value, label,
            products_found=len(outcome.products),
            error=outcome.error,
        )
        if debug:
            trace.append(StrategyAttempt(
                strategy=outcome.strategy.value,
                outcome=label,
                count=len(outcome.products),
                error=outcome.error,
            ))

    def _wrap(self, query: SearchQuery, outcome: StrategyResult, trace: list[StrategyAttempt]) -> SearchResult:
        info = outcome.extracted_info or query.info
        return SearchResult(
            success=outcome.success,
            products=list(outcome.products),
            search_info=SearchInfo(
                original_query=query.raw,
                normalized_query=query.normalized,
                strategy=outcome.strategy.value,
                extracted_info=info.to_dict(),
                features=list(outcome.features or query.features),
                result_count=len(outcome.products),
                trace=trace,
            ),
            message=outcome.message,
        )

    def _total_failure(
        self,
        original: str,
        query: Optional[SearchQuery],
        error: str,
        trace: list[StrategyAttempt],
    ) -> SearchResult:
        _logger.error(
            f"Search failed: {error}",
            extra={"event": "search_failed", "query": original, "error": error},
        )
        return SearchResult(
            success=False,
            products=[],
            search_info=SearchInfo(
                original_query=original,
                normalized_query=query.normalized if query else "",
                strategy=StrategyName.NONE.value,
                extracted_info=query.info.to_dict() if query else {},
                features=list(query.features) if query else [],
                trace=trace,
            ),
            message=ERROR_MESSAGE,
            error=error,
        )
