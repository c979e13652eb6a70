"""
Core data models for product matching.

Defines all data structures passed between the normalizer, extractor,
criteria builder, strategies and orchestrator.
These are pure Python dataclasses with no external dependencies.
"""

from dataclasses import dataclass, field, asdict
from typing import Optional, Any
from enum import Enum
from datetime import datetime


class ProductType(Enum):
    """Coarse product category guessed from the query."""
    PHONE = "phone"
    TABLET = "tablet"
    ACCESSORY = "accessory"


class StrategyName(Enum):
    """
    Search strategies, in cascade order.

    NONE is only used when nothing ran to completion (total failure).
    """
    EXACT_MODEL = "exact_model"
    BRAND_BASED = "brand_based"
    FEATURE_BASED = "feature_based"
    FUZZY_TOKEN = "fuzzy_token"
    FALLBACK_POPULAR = "fallback_popular"
    NONE = "none"


@dataclass(frozen=True)
class ExtractedInfo:
    """
    Attributes guessed from a query.

    Attributes:
        brand: Canonical brand name ("Apple", "Samsung")
        model: Model text as typed ("15", "a51", "note 13 pro")
        variant: Canonical variant ("pro max", "ultra")
        storage: Storage in GB (TB already converted)
        type: Product category
    """
    brand: Optional[str] = None
    model: Optional[str] = None
    variant: Optional[str] = None
    storage: Optional[int] = None
    type: ProductType = ProductType.PHONE

    def has_signal(self) -> bool:
        """True if brand, model or storage was found."""
        return bool(self.brand or self.model or self.storage)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data

    def __str__(self) -> str:
        parts = [f"{k}={v}" for k, v in self.to_dict().items() if v is not None]
        return f"ExtractedInfo({', '.join(parts)})"


@dataclass(frozen=True)
class Brand:
    """Brand record referenced by products."""
    id: Any
    name: str


@dataclass
class Product:
    """
    Catalog product.

    Owned by the catalog; the engine only reads it and hands out scored
    copies (see Scorer). Fields the catalog has but the engine does not use
    are kept in metadata.

    Attributes:
        id: Catalog identifier
        name: Display name ("Samsung Galaxy A51 128GB")
        price: Price in VND
        brand: Joined brand record, None when unknown
        storage: Storage in GB
        ram: RAM in GB
        battery: Battery capacity in mAh
        variants: Sub-variant records ({"storage": 256, "price": ...})
        score: Relevance score, only set on search results
    """
    id: Any
    name: str
    price: Optional[float] = None
    stock: int = 0
    rating: float = 0.0
    sold: int = 0
    brand: Optional[Brand] = None
    storage: Optional[int] = None
    ram: Optional[int] = None
    battery: Optional[int] = None
    chipset: Optional[str] = None
    camera_rear: Optional[str] = None
    camera_front: Optional[str] = None
    description: str = ""
    variants: list[dict[str, Any]] = field(default_factory=list)
    created_at: Optional[datetime] = None
    metadata: dict[str, Any] = field(default_factory=dict)
    score: Optional[float] = None

    @property
    def brand_name(self) -> str:
        return self.brand.name if self.brand else ""

    def get(self, key: str, default: Any = None) -> Any:
        """Get metadata value safely."""
        return self.metadata.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["brand"] = self.brand_name or None
        return data


@dataclass(frozen=True)
class FieldCondition:
    """
    One predicate on a product field.

    Operators:
        regex: value is a pattern source, matched case-insensitively
        eq / lt / gt / gte: numeric comparison
        exists: field is present and non-empty (value ignored)
    """
    field: str
    op: str
    value: Any = None


@dataclass
class SearchCriteria:
    """
    Catalog predicate: OR of any_of, ANDed with every all_of condition.

    Built once per strategy attempt. An empty criteria means "do not run a
    query", never "match everything".
    """
    any_of: list[FieldCondition] = field(default_factory=list)
    all_of: list[FieldCondition] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.any_of and not self.all_of


@dataclass(frozen=True)
class SearchQuery:
    """Everything the strategies need, computed once per search call."""
    raw: str
    normalized: str
    info: ExtractedInfo
    features: tuple[str, ...] = ()


@dataclass
class StrategyResult:
    """
    Outcome of one strategy attempt.

    success=False with products is the fallback's "suggestions, not an
    answer" signal. error is set when the strategy failed rather than
    declined.
    """
    success: bool
    products: list[Product] = field(default_factory=list)
    strategy: StrategyName = StrategyName.NONE
    extracted_info: Optional[ExtractedInfo] = None
    features: list[str] = field(default_factory=list)
    message: Optional[str] = None
    error: Optional[str] = None

    @classmethod
    def declined(cls, strategy: StrategyName, error: Optional[str] = None) -> "StrategyResult":
        return cls(success=False, strategy=strategy, error=error)


@dataclass(frozen=True)
class StrategyAttempt:
    """Debug trace entry for one strategy that ran."""
    strategy: str
    outcome: str  # "success", "declined", "suggested", "error"
    count: int = 0
    error: Optional[str] = None


@dataclass
class SearchInfo:
    """Structured explanation of how a result was produced."""
    original_query: str
    normalized_query: str = ""
    strategy: str = StrategyName.NONE.value
    extracted_info: dict[str, Any] = field(default_factory=dict)
    features: list[str] = field(default_factory=list)
    result_count: int = 0
    trace: list[StrategyAttempt] = field(default_factory=list)


@dataclass
class SearchResult:
    """
    Final response of a search call.

    Three shapes are possible:
        success=True, products        - confident match
        success=False, products       - popular suggestions, not an answer
        success=False, no products    - no data (error=None) or
                                        subsystem failure (error set)
    """
    success: bool
    products: list[Product]
    search_info: SearchInfo
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def strategy(self) -> str:
        return self.search_info.strategy

    @property
    def is_total_failure(self) -> bool:
        return not self.success and not self.products and self.error is not None

    def to_dict(self) -> dict[str, Any]:
        data = {
            "success": self.success,
            "products": [p.to_dict() for p in self.products],
            "search_info": asdict(self.search_info),
        }
        if self.message is not None:
            data["message"] = self.message
        if self.error is not None:
            data["error"] = self.error
        return data

    def __str__(self) -> str:
        return (
            f"SearchResult(success={self.success}, strategy={self.strategy}, "
            f"products={len(self.products)})"
        )
