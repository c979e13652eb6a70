"""Product matching engine for the phone store assistant."""

from matching.context import (
    ProductType,
    StrategyName,
    ExtractedInfo,
    Brand,
    Product,
    FieldCondition,
    SearchCriteria,
    SearchQuery,
    StrategyResult,
    StrategyAttempt,
    SearchInfo,
    SearchResult,
)
from matching.normalize import normalize
from matching.extractor import EntityExtractor
from matching.features import FeatureDetector
from matching.criteria import CriteriaBuilder, escape_fragment
from matching.scorer import Scorer, ScoreWeights
from matching.strategies import FALLBACK_MESSAGE, NO_MATCH_MESSAGE
from matching.search import ProductSearchService, SearchConfig, SearchError, ERROR_MESSAGE

__all__ = [
    "ProductType",
    "StrategyName",
    "ExtractedInfo",
    "Brand",
    "Product",
    "FieldCondition",
    "SearchCriteria",
    "SearchQuery",
    "StrategyResult",
    "StrategyAttempt",
    "SearchInfo",
    "SearchResult",
    "normalize",
    "EntityExtractor",
    "FeatureDetector",
    "CriteriaBuilder",
    "escape_fragment",
    "Scorer",
    "ScoreWeights",
    "FALLBACK_MESSAGE",
    "NO_MATCH_MESSAGE",
    "ProductSearchService",
    "SearchConfig",
    "SearchError",
    "ERROR_MESSAGE",
]
