"""Static vocabulary for product matching: patterns, aliases, keywords."""

from vocab.aliases import (
    DIACRITIC_TABLE,
    BRAND_ALIASES,
    BRAND_TOKEN_PATTERNS,
    VARIANT_ALIASES,
    FEATURE_KEYWORDS,
    WHOLE_WORD_FEATURE_KEYWORDS,
    canonical_variant,
)
from vocab.patterns import (
    STORAGE_PATTERN,
    VENDOR_PATTERNS,
    MODEL_TOKEN_PATTERN,
    MODEL_STOPLIST,
    HIGH_END_CHIPSET_PATTERN,
)

__all__ = [
    "DIACRITIC_TABLE",
    "BRAND_ALIASES",
    "BRAND_TOKEN_PATTERNS",
    "VARIANT_ALIASES",
    "FEATURE_KEYWORDS",
    "WHOLE_WORD_FEATURE_KEYWORDS",
    "canonical_variant",
    "STORAGE_PATTERN",
    "VENDOR_PATTERNS",
    "MODEL_TOKEN_PATTERN",
    "MODEL_STOPLIST",
    "HIGH_END_CHIPSET_PATTERN",
]
