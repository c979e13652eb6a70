"""
Regex patterns for product attribute extraction.

All patterns run against normalized text (lowercase, ASCII, no punctuation),
so they are written lowercase and never need to handle diacritics.

Order matters everywhere in this module: the vendor cascade returns on the
first match, so more specific patterns are listed before looser ones.
"""

import re

# === Storage ===

# "256gb", "1 tb", "128 gb" - first match wins
STORAGE_PATTERN = re.compile(r'\b(\d{2,4})\s*(gb|tb)\b', re.IGNORECASE)

# Price amounts ("10 trieu", "500k") - never a model number
MONEY_PATTERN = re.compile(
    r'\b\d+\s*(?:trieu|tr|k|nghin|ngan|million)\b',
    re.IGNORECASE,
)


# === Category short-circuits ===

TABLET_PATTERN = re.compile(r'\bipad\b', re.IGNORECASE)
TABLET_MODEL_PATTERN = re.compile(r'ipad\s*(pro|air|mini)?', re.IGNORECASE)

ACCESSORY_PATTERN = re.compile(
    r'\btai\s*nghe\b|\bairpods\b|\bearbuds?\b|\bheadphones?\b|\bearphones?\b',
    re.IGNORECASE,
)
AIRPODS_PATTERN = re.compile(r'\bairpods\b', re.IGNORECASE)


# === Vendor pattern cascade ===

# Longer forms first: "pro max" must win over "pro"
IPHONE_VARIANT = r'(pro\s*max|promax|pmax|prm|pm|pro|plus|mini|max)'

# A model number must not be the start of a storage token ("iphone 256gb")
NOT_STORAGE = r'(?!\d|\s*[gt]b\b)'

# Ordered (vendor_key, patterns). Group 1 = model, group 2 = variant.
VENDOR_PATTERNS = (
    ('iphone', (
        re.compile(rf'iphone\s*(?:series\s*)?(\d{{1,4}}){NOT_STORAGE}(?:\s*{IPHONE_VARIANT}\b)?', re.IGNORECASE),
        re.compile(rf'\bip\s*(\d{{1,4}}){NOT_STORAGE}(?:\s*{IPHONE_VARIANT}\b)?', re.IGNORECASE),
        re.compile(rf'iphone\s*{IPHONE_VARIANT}\b', re.IGNORECASE),
        # X series: x, xs, xr, xs max
        re.compile(r'iphone\s*(x[sr]?(?:\s*max)?(?:\s*pro)?)\b(?:\s*(max|pro)\b)?', re.IGNORECASE),
        re.compile(r'\bip\s*(x[sr]?(?:\s*max)?(?:\s*pro)?)\b', re.IGNORECASE),
    )),
    ('samsung', (
        re.compile(r'samsung\s*(?:galaxy\s*)?([a-z]?\d{1,3}(?:\s*(?:ultra|plus|note|fe)\b)?)\b', re.IGNORECASE),
        re.compile(r'galaxy\s*([a-z]?\d{1,3}(?:\s*(?:ultra|plus|note|fe)\b)?)\b', re.IGNORECASE),
        re.compile(r'\b(?:samsung|sam)\b.*?\b(s\d{1,3}|note\s*\d{1,3}|j\d{1,3})\b', re.IGNORECASE),
    )),
    ('xiaomi', (
        re.compile(r'(?:xiaomi|redmi|poco)\s*(?:mi\s*)?([a-z]*\s*\d{1,4}(?:\s*(pro|plus|ultra|t|note)\b)?)\b', re.IGNORECASE),
        re.compile(r'\b(?:redmi|poco)\s*(note\s*\d{1,4}|[a-z]*\d{1,4})\b', re.IGNORECASE),
    )),
    ('oppo', (
        re.compile(r'oppo\s*([a-z]*\s*\d{1,4}(?:\s*(pro|plus|neo|f)\b)?)\b', re.IGNORECASE),
        re.compile(r'\breno\s*(\d{1,4})(?:\s*(pro|plus|f)\b)?\b', re.IGNORECASE),
        re.compile(r'\bfind\s*([nx]?\d{1,4})\b', re.IGNORECASE),
    )),
    ('vivo', (
        re.compile(r'vivo\s*([a-z]*\s*\d{1,4}(?:\s*(pro|e|neo)\b)?)\b', re.IGNORECASE),
        re.compile(r'\bv\s*(\d{1,4}[a-z]?)\b', re.IGNORECASE),
    )),
    ('realme', (
        re.compile(r'realme\s*([a-z]*\s*\d{1,4}(?:\s*(pro|neo|max)\b)?)\b', re.IGNORECASE),
    )),
)

# Variant keywords looked up inside a model string when group 2 is absent
VARIANT_KEYWORD_PATTERN = re.compile(
    r'\b(pro\s*max|promax|pro|max|ultra|plus|mini|neo|t|note)\b',
    re.IGNORECASE,
)

# Generic words dropped from an extracted model
MODEL_NOISE_PATTERN = re.compile(r'\bseries\b', re.IGNORECASE)


# === Simple model numbers ===

# "15", "13t", "s24", "a51"
MODEL_TOKEN_PATTERN = re.compile(r'\b([a-z]*\d{1,4}[a-z]*)\b', re.IGNORECASE)

# Tokens that look like model numbers but are not
MODEL_STOPLIST = (
    'gia', 'mau', 'hien', 'bao',
    '3g', '4g', '5g', '2sim', '1sim', '24h',
)


# === Feature filters ===

HIGH_END_CHIPSET_PATTERN = r'snapdragon\s*8|dimensity\s*[89]|exynos|\ba1[3-8]\b'


def strip_spans(pattern: re.Pattern, text: str) -> str:
    """Blank out every match of pattern, keeping word positions apart."""
    return re.sub(r'\s+', ' ', pattern.sub(' ', text)).strip()
