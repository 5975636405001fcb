"""
Title heuristics: product category detection and search keyword extraction.

Both functions are pure and total. Category rules are checked in a fixed
order and the first match wins, so reordering CATEGORY_RULES changes results.
"""

import re
from typing import Callable, List, Tuple

DEFAULT_CATEGORY = "electronics"
DEFAULT_KEYWORDS = "product"

STOPWORDS = {"the", "and", "for", "with", "new", "used", "like", "good", "great", "condition", "sale"}
MAX_FILTERED_WORDS = 4

YEAR_RE = re.compile(r"\b(?:19|20)\d{2}\b")
MODEL_RE = re.compile(r"^(?:[a-z0-9]+(?:-[a-z0-9]+)+|(?=[a-z0-9]*\d)(?=[a-z0-9]*[a-z])[a-z0-9]+)$")
TOKEN_STRIP = "()[]{}.,;:!?\"'"


def _any(text: str, *words: str) -> bool:
    return any(w in text for w in words)


def _is_motorcycle_make_model(t: str) -> bool:
    # brands shared with cars only count as motorcycles with a bike signal
    return (
        ("honda" in t and _any(t, "cbr", "motorcycle", "bike"))
        or ("bmw" in t and _any(t, "motorcycle", "bike"))
    )


def _is_vehicle(t: str) -> bool:
    if _is_motorcycle_make_model(t) or "motorcycle" in t:
        return False
    return _any(
        t, "car", "truck", "suv", "vehicle", "auto", "ford", "toyota", "honda", "chevy",
        "chevrolet", "nissan", "bmw", "mercedes", "audi", "lexus", "sedan", "coupe",
    )


def _is_motorcycle(t: str) -> bool:
    return (
        _any(t, "motorcycle", "bike", "yamaha", "kawasaki", "suzuki", "harley", "ducati", "triumph", "ktm")
        or _is_motorcycle_make_model(t)
    )


def _is_real_estate(t: str) -> bool:
    return (
        _any(t, "house", "apartment", "condo", "townhouse", "property", "real estate", "home for sale")
        or ("bedroom" in t and "bath" in t)
    )


def _is_smartphone(t: str) -> bool:
    return (
        _any(t, "iphone", "pixel", "smartphone", "mobile phone", "android phone", "oneplus")
        or ("samsung" in t and _any(t, "galaxy", "phone"))
    )


def _is_laptop(t: str) -> bool:
    return (
        _any(t, "macbook", "laptop", "notebook", "dell xps", "thinkpad", "chromebook", "surface pro")
        or ("computer" in t and "desktop" not in t)
    )


def _is_gaming(t: str) -> bool:
    return (
        _any(t, "playstation", "ps5", "ps4", "xbox", "nintendo", "console", "gaming")
        or ("switch" in t and "network switch" not in t)
        or ("game" in t and _any(t, "console", "system"))
    )


def _is_camera(t: str) -> bool:
    return (
        _any(t, "camera", "canon", "nikon", "fujifilm", "dslr", "mirrorless")
        or ("sony" in t and _any(t, "camera", "alpha"))
        or ("lens" in t and _any(t, "camera", "mm"))
    )


def _is_audio(t: str) -> bool:
    return (
        _any(t, "headphones", "earbuds", "airpods", "bose", "speaker", "audio", "sonos")
        or ("sound" in t and _any(t, "system", "bar"))
        or ("beats" in t and "beats per" not in t)
    )


def _is_furniture(t: str) -> bool:
    return _any(t, "sofa", "couch", "chair", "table", "desk", "bed", "dresser", "furniture", "cabinet", "bookshelf")


def _is_appliance(t: str) -> bool:
    return _any(t, "refrigerator", "fridge", "washer", "dryer", "dishwasher", "microwave", "oven", "stove", "appliance")


def _is_jewelry(t: str) -> bool:
    return (
        _any(t, "ring", "necklace", "bracelet", "gold", "silver", "diamond", "jewelry")
        or ("watch" in t and "apple watch" not in t)
    )


def _is_clothing(t: str) -> bool:
    return _any(t, "shirt", "pants", "jeans", "dress", "jacket", "coat", "shoes", "clothing", "apparel")


CATEGORY_RULES: List[Tuple[str, Callable[[str], bool]]] = [
    ("vehicle", _is_vehicle),
    ("motorcycle", _is_motorcycle),
    ("real_estate", _is_real_estate),
    ("smartphone", _is_smartphone),
    ("laptop", _is_laptop),
    ("gaming", _is_gaming),
    ("camera", _is_camera),
    ("audio", _is_audio),
    ("furniture", _is_furniture),
    ("appliance", _is_appliance),
    ("jewelry", _is_jewelry),
    ("clothing", _is_clothing),
]


def detect_category(title) -> str:
    if not isinstance(title, str) or not title.strip():
        return DEFAULT_CATEGORY

    lowered = title.lower()
    for name, matches in CATEGORY_RULES:
        if matches(lowered):
            return name
    return DEFAULT_CATEGORY


def extract_keywords(title) -> str:
    """
    Reduce a listing title to a short search query.

    Years come first, then model-like tokens (letter/digit mixes such as
    "cbr600rr" or hyphenated ones such as "wh-1000xm4"), then up to four
    remaining words longer than two characters that are not filler.
    """
    if not isinstance(title, str) or not title.strip():
        return DEFAULT_KEYWORDS

    lowered = title.lower()
    tokens = [tok.strip(TOKEN_STRIP) for tok in lowered.split()]
    tokens = [tok for tok in tokens if tok]

    years = YEAR_RE.findall(lowered)
    models = [tok for tok in tokens if MODEL_RE.match(tok) and not YEAR_RE.fullmatch(tok)]

    picked: List[str] = []
    for tok in years + models:
        if tok not in picked:
            picked.append(tok)

    words = [tok for tok in tokens if len(tok) > 2 and tok not in STOPWORDS and tok not in picked]
    for tok in words[:MAX_FILTERED_WORDS]:
        if tok not in picked:
            picked.append(tok)

    return " ".join(picked) or DEFAULT_KEYWORDS
