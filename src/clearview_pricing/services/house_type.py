"""
House type guess from a free-text address via keyword matching.
"""
import re
from dataclasses import dataclass
from typing import Optional

DEFAULT_HOUSE_TYPE = "detached"

# Checked in order; first match wins.
HOUSE_TYPE_KEYWORDS = (
    ("apartment", ("apt", "apartment", "suite", "ste", "unit", "#")),
    ("condo", ("condo", "condominium", "tower")),
    ("townhouse", ("townhouse", "townhome", "th", "row house")),
    ("commercial", ("plaza", "mall", "shopping centre", "shopping center", "office", "industrial")),
    ("duplex", ("duplex", "triplex")),
)


@dataclass(frozen=True)
class HouseTypeGuess:
    house_type: str
    matched_keyword: Optional[str] = None

    @property
    def is_default(self) -> bool:
        return self.matched_keyword is None

    def to_dict(self) -> dict:
        return {"houseType": self.house_type, "matchedKeyword": self.matched_keyword}


def normalize_address(address: str) -> str:
    normalized = address.lower()
    normalized = re.sub(r"[^a-z0-9#\s]", " ", normalized)
    normalized = re.sub(r"\s+", " ", normalized).strip()
    return normalized


def guess_house_type(address: Optional[str]) -> HouseTypeGuess:
    if not address or not address.strip():
        return HouseTypeGuess(DEFAULT_HOUSE_TYPE)

    normalized = normalize_address(address)
    tokens = set(normalized.split())
    # "#" is glued to the unit number ("#204"), match it as a prefix
    has_hash = "#" in normalized

    for house_type, keywords in HOUSE_TYPE_KEYWORDS:
        for keyword in keywords:
            if keyword == "#":
                if has_hash:
                    return HouseTypeGuess(house_type, keyword)
            elif " " in keyword:
                if keyword in normalized:
                    return HouseTypeGuess(house_type, keyword)
            elif keyword in tokens:
                return HouseTypeGuess(house_type, keyword)

    return HouseTypeGuess(DEFAULT_HOUSE_TYPE)
