"""
Search criteria construction.

Turns ExtractedInfo into a catalog predicate. Every fragment that came
from user text goes through escape_fragment before it is embedded in a
pattern; no other code path composes patterns from user input.
"""

import re
from typing import Iterable, Optional

from matching.context import ExtractedInfo, FieldCondition, SearchCriteria
from vocab.aliases import BRAND_TOKEN_PATTERNS


def escape_fragment(fragment: str) -> str:
    """Escape user-derived text for literal use inside a regex."""
    return re.escape(str(fragment).strip())


def ordered_token_pattern(tokens: Iterable[str]) -> Optional[str]:
    """
    Pattern matching the tokens in order, anything in between.

    Returns None when there are no tokens.

    Example:
        ordered_token_pattern(["note", "13"])  # 'note.*13'
    """
    parts = [escape_fragment(t) for t in tokens if t and t.strip()]
    return ".*".join(parts) if parts else None


def brand_token_pattern(brand: str) -> str:
    """
    Pattern for a brand as catalog names spell it.

    Apple products are often named "iPhone ..." or "IP ..." without the
    word Apple, so known brands expand to an alternation.
    """
    known = BRAND_TOKEN_PATTERNS.get(brand.lower())
    return known if known else escape_fragment(brand)


class CriteriaBuilder:
    """
    Builds SearchCriteria from extracted attributes.

    Rules:
        brand + model -> "brand.*model" | "model.*brand" | "\\bmodel\\b"
        model only    -> "model"
        brand only    -> brand token alternation
        variant       -> extra OR clause on the variant
        storage       -> AND storage == n (never part of the OR group)
    """

    def build(self, info: ExtractedInfo) -> SearchCriteria:
        criteria = SearchCriteria()

        if info.brand and info.model:
            brand = brand_token_pattern(info.brand)
            model = escape_fragment(info.model)
            criteria.any_of.extend([
                FieldCondition("name", "regex", f"{brand}.*{model}"),
                FieldCondition("name", "regex", f"{model}.*{brand}"),
                FieldCondition("name", "regex", rf"\b{model}\b"),
            ])
        elif info.model:
            criteria.any_of.append(
                FieldCondition("name", "regex", escape_fragment(info.model))
            )
        elif info.brand:
            criteria.any_of.append(
                FieldCondition("name", "regex", brand_token_pattern(info.brand))
            )

        if info.variant:
            criteria.any_of.append(
                FieldCondition("name", "regex", escape_fragment(info.variant))
            )

        if info.storage:
            criteria.all_of.append(storage_constraint(info.storage))

        return criteria


def storage_constraint(storage: int) -> FieldCondition:
    """Exact storage filter shared by every strategy that honors storage."""
    return FieldCondition("storage", "eq", int(storage))
