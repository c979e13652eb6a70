"""
Entity extraction for product matching.

Extracts structured product attributes from user queries:
- Storage (256gb, 1tb)
- Category short-circuits (iPad -> tablet, tai nghe/AirPods -> accessory)
- Brand, model and variant from an ordered vendor pattern cascade
- Best-effort brand and bare model number when no vendor pattern matches

Pure Python, no external dependencies except the vocab tables.
"""

import re
from typing import Optional

from matching.context import ExtractedInfo, ProductType
from matching.normalize import normalize
from matching.structured_logging import get_logger
from vocab.aliases import BRAND_ALIASES, canonical_variant
from vocab.patterns import (
    STORAGE_PATTERN,
    MONEY_PATTERN,
    TABLET_PATTERN,
    TABLET_MODEL_PATTERN,
    ACCESSORY_PATTERN,
    AIRPODS_PATTERN,
    VENDOR_PATTERNS,
    VARIANT_KEYWORD_PATTERN,
    MODEL_NOISE_PATTERN,
    MODEL_TOKEN_PATTERN,
    MODEL_STOPLIST,
    strip_spans,
)

# Module-level logger
_logger = get_logger("matching.extractor")


class EntityExtractor:
    """
    Extracts brand/model/variant/storage from a query.

    Never raises: anything it cannot find is left as None, and the
    strategies treat that as "not enough signal".

    Example:
        extractor = EntityExtractor()
        info = extractor.extract("iphone 15 pro max 256gb")
        # Returns: ExtractedInfo(brand="Apple", model="15",
        #                        variant="pro max", storage=256)
    """

    def __init__(self, vendor_patterns=VENDOR_PATTERNS, brand_aliases=None):
        self.vendor_patterns = vendor_patterns
        self.brand_aliases = brand_aliases or BRAND_ALIASES

    def extract(self, query: str) -> ExtractedInfo:
        """
        Extract product attributes from a query.

        Args:
            query: Raw or normalized query (normalized again, idempotent)

        Returns:
            ExtractedInfo snapshot
        """
        q = normalize(query)
        storage = self._extract_storage(q)

        # Category short-circuits
        if TABLET_PATTERN.search(q):
            m = TABLET_MODEL_PATTERN.search(q)
            return ExtractedInfo(
                brand="Apple",
                model=m.group(1) if m and m.group(1) else None,
                storage=storage,
                type=ProductType.TABLET,
            )
        if ACCESSORY_PATTERN.search(q):
            if AIRPODS_PATTERN.search(q):
                return ExtractedInfo(
                    brand="Apple", model="AirPods", storage=storage,
                    type=ProductType.ACCESSORY,
                )
            return ExtractedInfo(storage=storage, type=ProductType.ACCESSORY)

        info = self._match_vendor_cascade(q, storage)
        if info is not None:
            return info

        return ExtractedInfo(
            brand=self._detect_brand(q),
            model=self._detect_simple_model(q),
            storage=storage,
        )

    def _extract_storage(self, q: str) -> Optional[int]:
        """Storage in GB from the first "<n> gb|tb" token."""
        m = STORAGE_PATTERN.search(q)
        if not m:
            return None
        size = int(m.group(1))
        if m.group(2).lower() == "tb":
            size *= 1024
        return size

    def _match_vendor_cascade(self, q: str, storage: Optional[int]) -> Optional[ExtractedInfo]:
        """
        Try every vendor's patterns in order; first match wins.

        Returns:
            ExtractedInfo on a match, None if no pattern matched
        """
        for vendor_key, patterns in self.vendor_patterns:
            for pattern in patterns:
                match = pattern.search(q)
                if not match:
                    continue

                groups = match.groups()
                model_part = groups[0] if groups and groups[0] else match.group(0)
                variant_part = groups[1] if len(groups) > 1 else None

                model = MODEL_NOISE_PATTERN.sub("", model_part)
                model = " ".join(model.split()) or None

                if variant_part:
                    variant = canonical_variant(variant_part)
                else:
                    variant = self._variant_from_model(model_part)

                _logger.debug(
                    f"Vendor pattern matched: {vendor_key}",
                    extra={"event": "vendor_match", "pattern": pattern.pattern},
                )
                return ExtractedInfo(
                    brand=self.brand_aliases.get(vendor_key, vendor_key),
                    model=model,
                    variant=variant,
                    storage=storage,
                )
        return None

    def _variant_from_model(self, model_text: str) -> Optional[str]:
        """First variant keyword inside the model text, canonicalized."""
        found = VARIANT_KEYWORD_PATTERN.search(model_text)
        return canonical_variant(found.group(1)) if found else None

    def _detect_brand(self, q: str) -> Optional[str]:
        """First brand alias (declaration order) contained in the query."""
        for alias, brand in self.brand_aliases.items():
            if alias in q:
                return brand
        return None

    def _detect_simple_model(self, q: str) -> Optional[str]:
        """
        Bare model number such as "15", "13t" or "s24".

        Storage and price amounts are removed first so "256gb" or
        "10 trieu" never become a model.
        """
        text = strip_spans(STORAGE_PATTERN, q)
        text = strip_spans(MONEY_PATTERN, text)
        for match in MODEL_TOKEN_PATTERN.finditer(text):
            token = match.group(1)
            if token not in MODEL_STOPLIST:
                return token
        return None
