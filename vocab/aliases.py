"""
Alias and keyword mappings for query understanding.

These tables are static and ordered: lookups that scan them (brand
containment, feature detection) depend on declaration order.
"""

# Vietnamese diacritic folding (lowercase only, applied after lower())
_DIACRITIC_GROUPS = {
    'a': 'àáạảãâầấậẩẫăằắặẳẵ',
    'e': 'èéẹẻẽêềếệểễ',
    'i': 'ìíịỉĩ',
    'o': 'òóọỏõôồốộổỗơờớợởỡ',
    'u': 'ùúụủũưừứựửữ',
    'y': 'ỳýỵỷỹ',
    'd': 'đ',
}

DIACRITIC_TABLE = str.maketrans({
    accented: plain
    for plain, accented_chars in _DIACRITIC_GROUPS.items()
    for accented in accented_chars
})

# Vendor keyword -> canonical brand name (declaration order is lookup order)
BRAND_ALIASES = {
    "iphone": "Apple",
    "ipad": "Apple",
    "apple": "Apple",
    "samsung": "Samsung",
    "galaxy": "Samsung",
    "sam": "Samsung",
    "xiaomi": "Xiaomi",
    "redmi": "Xiaomi",
    "poco": "Xiaomi",
    "oppo": "Oppo",
    "reno": "Oppo",
    "find": "Oppo",
    "vivo": "Vivo",
    "realme": "Realme",
    "airpods": "Apple",
}

# Short forms catalog names use for a brand (regex sources, trusted)
BRAND_TOKEN_PATTERNS = {
    "apple": r"(?:apple|iphone|ip)",
    "samsung": r"(?:samsung|galaxy)",
}

# Variant abbreviations -> canonical variant
VARIANT_ALIASES = {
    "prm": "pro max",
    "pm": "pro max",
    "pmax": "pro max",
    "promax": "pro max",
    "pro max": "pro max",
    "pro": "pro",
    "plus": "plus",
    "m": "mini",
    "mini": "mini",
    "max": "max",
    "ultra": "ultra",
    "neo": "neo",
    "t": "t",
    "note": "note",
}

# Feature -> keywords. Keywords are normalized before matching, so they
# are written the way customers type them.
FEATURE_KEYWORDS = {
    "price": ["rẻ", "giá rẻ", "giá thấp", "tiết kiệm", "bình dân", "budget", "dưới", "sinh viên"],
    "premium": ["cao cấp", "premium", "flagship", "đắt", "pro", "max", "ultra"],
    "gaming": ["gaming", "game", "chơi game", "hiệu năng cao", "mượt"],
    "camera": ["camera", "chụp ảnh", "selfie", "quay video", "zoom"],
    "battery": ["pin", "battery", "sạc", "dung lượng pin", "pin trâu"],
    "storage": ["bộ nhớ", "storage", "gb", "tb", "dung lượng"],
    "ram": ["ram", "memory"],
}

# Short keywords that occur inside unrelated words ("re" in "realme").
# These match whole words only, every other keyword matches as a substring.
WHOLE_WORD_FEATURE_KEYWORDS = ("rẻ",)


def canonical_variant(raw: str) -> str:
    """Map a raw variant token ("PM", "pro  max") to its canonical form."""
    key = " ".join(raw.lower().split())
    return VARIANT_ALIASES.get(key, key)
