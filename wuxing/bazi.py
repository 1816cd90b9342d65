"""
BaZi five-element profile engine (simplified).

Handles:
- Birth date to year/month/day pillar conversion
- Stem and branch to element mapping
- Position-weighted element scoring with a date-seeded perturbation
- Favorable element ranking
- Pillar string formatting and the combined profile payload

Design principle: this is a heuristic, not a perpetual calendar.
Month pillars ignore solar terms and day pillars count days from a
fixed reference date. The output feeds prompt construction, where a
stable, non-degenerate element distribution matters more than
astronomical fidelity.
"""

import logging
import math
import re
from dataclasses import dataclass
from enum import Enum

from wuxing.astro_calendar import day_offset

logger = logging.getLogger(__name__)


# ============================================================
# FUNDAMENTAL DATA STRUCTURES
# ============================================================

class Polarity(Enum):
    YANG = "yang"
    YIN = "yin"


class Element(Enum):
    # Declaration order is the canonical order used for offsets and tie-breaks.
    METAL = "metal"
    WOOD = "wood"
    WATER = "water"
    FIRE = "fire"
    EARTH = "earth"

    @property
    def chinese(self) -> str:
        return ELEMENT_CHINESE[self]

    @property
    def pinyin(self) -> str:
        return ELEMENT_PINYIN[self]


ELEMENT_CHINESE = {
    Element.METAL: "金",
    Element.WOOD: "木",
    Element.WATER: "水",
    Element.FIRE: "火",
    Element.EARTH: "土",
}

ELEMENT_PINYIN = {
    Element.METAL: "jin",
    Element.WOOD: "mu",
    Element.WATER: "shui",
    Element.FIRE: "huo",
    Element.EARTH: "tu",
}


@dataclass(frozen=True)
class HeavenlyStem:
    chinese: str
    pinyin: str
    element: Element
    polarity: Polarity
    index: int  # 0-9 in the cycle

    def __str__(self):
        return f"{self.pinyin} ({self.polarity.value} {self.element.value})"


@dataclass(frozen=True)
class EarthlyBranch:
    chinese: str
    pinyin: str
    animal: str
    element: Element
    polarity: Polarity
    index: int  # 0-11 in the cycle

    def __str__(self):
        return f"{self.pinyin} ({self.animal})"


@dataclass(frozen=True)
class Pillar:
    stem: HeavenlyStem
    branch: EarthlyBranch
    position: str  # "year", "month", "day"

    def __str__(self):
        return f"{self.stem.chinese}{self.branch.chinese}"

    def to_dict(self):
        return {
            "position": self.position,
            "stem": {
                "chinese": self.stem.chinese,
                "pinyin": self.stem.pinyin,
                "element": self.stem.element.value,
                "polarity": self.stem.polarity.value,
                "index": self.stem.index,
            },
            "branch": {
                "chinese": self.branch.chinese,
                "pinyin": self.branch.pinyin,
                "animal": self.branch.animal,
                "element": self.branch.element.value,
                "polarity": self.branch.polarity.value,
                "index": self.branch.index,
            },
            "combined": str(self),
            "description": f"{self.stem.pinyin} {self.branch.pinyin} "
                           f"({self.stem.polarity.value} {self.stem.element.value} {self.branch.animal})",
        }


_DATE_PATTERN = re.compile(r"^\s*(-?\d+)-(\d+)-(\d+)\s*$")


@dataclass(frozen=True)
class BirthDate:
    """
    A calendar birth date. Values are not range-checked: month 13 or
    day 32 are accepted and normalized by the calendar arithmetic.
    """
    year: int
    month: int
    day: int

    @classmethod
    def from_string(cls, text: str) -> "BirthDate":
        """Parse 'YYYY-MM-DD'. Raises ValueError if the text is not three integers."""
        match = _DATE_PATTERN.match(text)
        if match is None:
            raise ValueError(f"Expected YYYY-MM-DD, got {text!r}")
        year, month, day = (int(part) for part in match.groups())
        return cls(year, month, day)

    def __str__(self):
        return f"{self.year}-{self.month:02d}-{self.day:02d}"


# ============================================================
# STEM AND BRANCH DEFINITIONS
# ============================================================

HEAVENLY_STEMS = (
    HeavenlyStem("甲", "Jia", Element.WOOD, Polarity.YANG, 0),
    HeavenlyStem("乙", "Yi", Element.WOOD, Polarity.YIN, 1),
    HeavenlyStem("丙", "Bing", Element.FIRE, Polarity.YANG, 2),
    HeavenlyStem("丁", "Ding", Element.FIRE, Polarity.YIN, 3),
    HeavenlyStem("戊", "Wu", Element.EARTH, Polarity.YANG, 4),
    HeavenlyStem("己", "Ji", Element.EARTH, Polarity.YIN, 5),
    HeavenlyStem("庚", "Geng", Element.METAL, Polarity.YANG, 6),
    HeavenlyStem("辛", "Xin", Element.METAL, Polarity.YIN, 7),
    HeavenlyStem("壬", "Ren", Element.WATER, Polarity.YANG, 8),
    HeavenlyStem("癸", "Gui", Element.WATER, Polarity.YIN, 9),
)

EARTHLY_BRANCHES = (
    EarthlyBranch("子", "Zi", "Rat", Element.WATER, Polarity.YANG, 0),
    EarthlyBranch("丑", "Chou", "Ox", Element.EARTH, Polarity.YIN, 1),
    EarthlyBranch("寅", "Yin", "Tiger", Element.WOOD, Polarity.YANG, 2),
    EarthlyBranch("卯", "Mao", "Rabbit", Element.WOOD, Polarity.YIN, 3),
    EarthlyBranch("辰", "Chen", "Dragon", Element.EARTH, Polarity.YANG, 4),
    EarthlyBranch("巳", "Si", "Snake", Element.FIRE, Polarity.YIN, 5),
    EarthlyBranch("午", "Wu", "Horse", Element.FIRE, Polarity.YANG, 6),
    EarthlyBranch("未", "Wei", "Goat", Element.EARTH, Polarity.YIN, 7),
    EarthlyBranch("申", "Shen", "Monkey", Element.METAL, Polarity.YANG, 8),
    EarthlyBranch("酉", "You", "Rooster", Element.METAL, Polarity.YIN, 9),
    EarthlyBranch("戌", "Xu", "Dog", Element.EARTH, Polarity.YANG, 10),
    EarthlyBranch("亥", "Hai", "Pig", Element.WATER, Polarity.YIN, 11),
)

# Lookup helpers
STEM_BY_CHINESE = {s.chinese: s for s in HEAVENLY_STEMS}
BRANCH_BY_CHINESE = {b.chinese: b for b in EARTHLY_BRANCHES}


# ============================================================
# PILLAR COMPUTATION
# ============================================================

def year_pillar(year: int) -> Pillar:
    """
    Compute the Year Pillar.

    No Li Chun adjustment: the Gregorian year is used as-is.
    Year 4 CE was Jia Zi, so (year - 4) indexes both cycles.
    """
    stem_index = (year - 4) % 10
    branch_index = (year - 4) % 12
    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[branch_index],
        position="year"
    )


def month_pillar(year: int, month: int) -> Pillar:
    """
    Compute the Month Pillar (approximate Five Tigers rule).

    The month stem advances two per year stem plus one per month; the
    branch follows the Gregorian month number. Solar term boundaries
    are ignored, so a birth on Feb 2 and Feb 28 share a pillar.
    """
    year_stem_index = (year - 4) % 10
    stem_index = (year_stem_index * 2 + month + 1) % 10
    branch_index = (month + 1) % 12
    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[branch_index],
        position="month"
    )


def day_pillar(year: int, month: int, day: int) -> Pillar:
    """Compute the Day Pillar by counting days from 1900-01-31."""
    offset = day_offset(year, month, day)
    stem_index = (offset + 10) % 10
    branch_index = (offset + 12) % 12
    return Pillar(
        stem=HEAVENLY_STEMS[stem_index],
        branch=EARTHLY_BRANCHES[branch_index],
        position="day"
    )


def birth_pillars(birth_date: BirthDate) -> list[Pillar]:
    """Year, month and day pillars, in that order."""
    return [
        year_pillar(birth_date.year),
        month_pillar(birth_date.year, birth_date.month),
        day_pillar(birth_date.year, birth_date.month, birth_date.day),
    ]


# ============================================================
# ELEMENT SCORING
# ============================================================

# Applied to (year stem, month stem, day stem, year branch, month branch, day branch).
# The day stem is the Day Master and dominates.
POSITION_WEIGHTS = (1.5, 1.0, 2.0, 1.0, 0.8, 0.8)

PERTURBATION_AMPLITUDE = 0.5
SCORE_FLOOR = 0.5


def perturbation_offsets(seed: int) -> list[float]:
    """
    Per-element offsets in canonical element order.

    Deterministic trigonometric functions of the seed (radians), so the
    same birth date always gets the same nudge.
    """
    return [
        math.sin(seed) * PERTURBATION_AMPLITUDE,
        math.cos(seed) * PERTURBATION_AMPLITUDE,
        math.sin(seed * 2) * PERTURBATION_AMPLITUDE,
        math.cos(seed * 2) * PERTURBATION_AMPLITUDE,
        math.sin(seed * 3) * PERTURBATION_AMPLITUDE,
    ]


def element_score(birth_date: BirthDate) -> dict:
    """
    Weighted element distribution for a birth date.

    Each of the six pillar symbols adds its position weight to its
    element. A seed of year + month + day then drives a small offset per
    element, and every score is clamped to SCORE_FLOOR.

    Returns:
        dict keyed by element value in canonical order
        (metal, wood, water, fire, earth), every value >= 0.5
    """
    yp, mp, dp = birth_pillars(birth_date)
    symbols = [
        yp.stem.element, mp.stem.element, dp.stem.element,
        yp.branch.element, mp.branch.element, dp.branch.element,
    ]

    score = {e.value: 0.0 for e in Element}
    for element, weight in zip(symbols, POSITION_WEIGHTS):
        score[element.value] += weight

    seed = birth_date.year + birth_date.month + birth_date.day
    for element, offset in zip(Element, perturbation_offsets(seed)):
        score[element.value] = max(SCORE_FLOOR, score[element.value] + offset)

    return score


# ============================================================
# FAVORABLE ELEMENTS
# ============================================================

TOP_ELEMENT_COUNT = 3

FAVORABLE_LABELS = (
    "Primary Favorable (喜用神)",
    "Secondary Favorable (次喜)",
    "Supporting Favorable (喜用)",
)


def top_elements(score: dict, count: int = TOP_ELEMENT_COUNT) -> list[str]:
    """
    Strongest elements first.

    sorted() is stable, so equal scores keep canonical order
    (metal before wood before water before fire before earth).
    """
    canonical = [e.value for e in Element if e.value in score]
    ranked = sorted(canonical, key=lambda name: -score[name])
    return ranked[:count]


# ============================================================
# FORMATTING AND FULL PROFILE
# ============================================================

def format_bazi(birth_date: BirthDate) -> str:
    """Pillars as 'YsYb MsMb DsDb', e.g. '庚辰 壬午 癸巳'."""
    return " ".join(str(p) for p in birth_pillars(birth_date))


def compute_profile(birth_date: BirthDate) -> dict:
    """
    Compute the full five-element profile for a birth date.

    This is the payload handed to prompt construction: the pillars, the
    Day Master, raw element scores and the ranked favorable elements.
    """
    pillars = birth_pillars(birth_date)
    yp, mp, dp = pillars
    day_master = dp.stem
    score = element_score(birth_date)
    favorable = top_elements(score)

    logger.debug("Pillars for %s: %s", birth_date, " ".join(str(p) for p in pillars))

    return {
        "birth_date": {
            "year": birth_date.year,
            "month": birth_date.month,
            "day": birth_date.day,
        },
        "bazi": " ".join(str(p) for p in pillars),
        "day_master": {
            "stem": day_master.pinyin,
            "chinese": day_master.chinese,
            "element": day_master.element.value,
            "polarity": day_master.polarity.value,
            "description": str(day_master),
        },
        "pillars": {
            "year": yp.to_dict(),
            "month": mp.to_dict(),
            "day": dp.to_dict(),
        },
        "element_scores": score,
        "favorable_elements": [
            {
                "rank": rank,
                "label": label,
                "element": name,
                "chinese": Element(name).chinese,
                "pinyin": Element(name).pinyin,
                "score": score[name],
            }
            for rank, (label, name) in enumerate(zip(FAVORABLE_LABELS, favorable), start=1)
        ],
    }
