"""Rule-based commodity classification.

Rules are evaluated top to bottom and the first match wins, so the order below is
part of the behaviour: ``cooking oil`` must land in processed products before the
cash-crop rule sees ``sunflower``, and ``pepper`` is a vegetable because that rule
precedes spices and herbs. Keep new rules in priority position rather than
appending them.
"""

from __future__ import annotations

import re
from typing import Final

from agriprice.domain.model import CropCategory

type Rule[T] = tuple[re.Pattern[str], T]

CATEGORY_RULES: Final[tuple[Rule[CropCategory], ...]] = (
    (re.compile(r"fertilizer"), CropCategory.FARM_INPUTS),
    (re.compile(r"sunflower cake|cotton seed cake|bran|pollard"), CropCategory.ANIMAL_FEEDS),
    (re.compile(r"oil|cooking fat"), CropCategory.PROCESSED_PRODUCTS),
    (
        re.compile(
            r"tea|coffee|cotton|macadamia|cashew|korosho|sisal|pyrethrum|sunflower"
        ),
        CropCategory.CASH_CROPS,
    ),
    (
        re.compile(
            r"donkey|cattle|cow|bull|goat|sheep|camel|pig|livestock|heifer|steer|rabbit"
        ),
        CropCategory.LIVESTOCK,
    ),
    (re.compile(r"chicken|poultry|turkey|duck|geese|hen"), CropCategory.POULTRY),
    (
        re.compile(
            r"fish|tilapia|omena|nile perch|catfish|mudfish|haplochromis|trout|carp"
            r"|protopterus|bass|labeo|mormyrus|eel|synodontis|alestes|barbus|snapper"
            r"|demersal|barracuda|kasumba|tuna|mackerel|shark|sardine|lobster|kamba"
            r"|prawn|crab|kaa|shrimp|octopus|pweza|squid|ngisi|oyster|scavenger|changu"
            r"|tangu|grouper|grunt|taamamba|kora|mullet|fumi|threadfin|bream|jack"
            r"|trevally|kolekole|halfbeak|anchov|herring|marlin|pelagic|rockcode|tewa"
        ),
        CropCategory.FISHERIES,
    ),
    (re.compile(r"egg|milk|honey|beef|mutton|pork|meat"), CropCategory.ANIMAL_PRODUCTS),
    (re.compile(r"maize|rice|wheat|sorghum|millet|barley|oat|cereal"), CropCategory.CEREALS),
    (
        re.compile(
            r"bean|pea|gram|cowpea|lentil|njahi|dolichos|pulse|soya|ground\s?nut|peanut"
            r"|njugu mawe"
        ),
        CropCategory.LEGUMES,
    ),
    (
        re.compile(r"potato|cassava|yam|arrow root|sweet potato|cocoyam|tuber"),
        CropCategory.ROOTS_TUBERS,
    ),
    (
        re.compile(
            r"banana|mango|orange|pineapple|pawpaw|watermelon|avocado|passion|lemon|lime"
            r"|tangerine|guava|jackfruit|berry|berries|melon|grape|apple|dragon\s?fruit"
            r"|coconut"
        ),
        CropCategory.FRUITS,
    ),
    (
        re.compile(
            r"tomato|kales|sukuma|cabbage|onion|spinach|carrot|pepper|chilli|brinjal"
            r"|lettuce|managu|terere|vegetable|broccoli|cauliflower|cucumber|kunda|mrenda"
            r"|spider\s?flower|saga|jute|pumpkin|butternut|capsicum|crotolaria|mito|miro"
            r"|courgette|okra|gumbo|lady's\s?finger"
        ),
        CropCategory.VEGETABLES,
    ),
    (
        re.compile(r"ginger|garlic|coriander|dhania|chives|turmeric|pepper|chilies"),
        CropCategory.SPICES_HERBS,
    ),
)

UNIT_RULES: Final[tuple[Rule[str], ...]] = (
    (re.compile(r"milk|oil|juice|honey|yoghurt"), "litre"),
    (re.compile(r"egg"), "tray"),
    (
        re.compile(r"timber|post|pole|pineapple|watermelon|coconut|pumpkin|butternut|cabbage"),
        "piece",
    ),
)

CATEGORY_UNITS: Final[dict[CropCategory, str]] = {
    CropCategory.LIVESTOCK: "head",
    CropCategory.POULTRY: "bird",
}

DEFAULT_UNIT: Final[str] = "kg"


def _first_match[T](rules: tuple[Rule[T], ...], text: str) -> T | None:
    for pattern, outcome in rules:
        if pattern.search(text):
            return outcome
    return None


def classify(raw_name: str | None) -> CropCategory:
    """Map a raw commodity name to its category; unknown names fall back to ``general``."""

    match = _first_match(CATEGORY_RULES, (raw_name or "").lower())
    return match if match is not None else CropCategory.GENERAL


def determine_unit(category: CropCategory | str, raw_name: str | None) -> str:
    """Pick the default trading unit for a commodity."""

    category_unit = CATEGORY_UNITS.get(CropCategory(category))
    if category_unit is not None:
        return category_unit
    match = _first_match(UNIT_RULES, (raw_name or "").lower())
    return match if match is not None else DEFAULT_UNIT


__all__ = [
    "CATEGORY_RULES",
    "DEFAULT_UNIT",
    "UNIT_RULES",
    "classify",
    "determine_unit",
]
