"""
Feature keyword detection (price, premium, gaming, camera, ...).
"""

from matching.normalize import normalize
from vocab.aliases import FEATURE_KEYWORDS, WHOLE_WORD_FEATURE_KEYWORDS


class FeatureDetector:
    """
    Detects feature intents by keyword containment.

    Keywords are normalized with the same function as queries and matched
    as substrings, so "256gb" fires storage and "gamer" fires gaming.
    Keywords listed in WHOLE_WORD_FEATURE_KEYWORDS only match whole words,
    so "re" (cheap) does not fire inside "realme".

    Example:
        FeatureDetector().detect("dien thoai choi game duoi 10 trieu")
        # Returns: ["price", "gaming"]
    """

    def __init__(self, keywords: dict[str, list[str]] = None, whole_words=WHOLE_WORD_FEATURE_KEYWORDS):
        source = keywords or FEATURE_KEYWORDS
        self.keywords = {
            feature: [normalize(kw) for kw in kws if normalize(kw)]
            for feature, kws in source.items()
        }
        self.whole_words = {normalize(kw) for kw in whole_words}

    def _contains(self, query: str, keyword: str) -> bool:
        if keyword in self.whole_words:
            return f" {keyword} " in f" {query} "
        return keyword in query

    def detect(self, query: str) -> list[str]:
        """Features mentioned in the query, in table order."""
        normalized = normalize(query)
        features = []
        for feature, keywords in self.keywords.items():
            if any(self._contains(normalized, kw) for kw in keywords):
                features.append(feature)
        return features
