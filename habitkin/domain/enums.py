"""Enums and value objects used across the domain."""
from enum import Enum


class _Choice(str, Enum):
    """String enum whose members carry a human label for the editor."""

    def __new__(cls, value: str, label: str):
        obj = str.__new__(cls, value)
        obj._value_ = value
        obj.label = label
        return obj

    @classmethod
    def values(cls) -> list:
        return [member.value for member in cls]


# ---------------------------------------------------------------------------
# Avatar recipe domains
# ---------------------------------------------------------------------------

class SkinTone(_Choice):
    S1 = ("s1", "Porcelain")
    S2 = ("s2", "Light")
    S3 = ("s3", "Medium")
    S4 = ("s4", "Tan")
    S5 = ("s5", "Brown")
    S6 = ("s6", "Deep")


class HairStyle(_Choice):
    NONE = ("h0", "None")
    CLASSIC = ("h1", "Classic")
    SWEEP = ("h2", "Sweep")
    CURLS = ("h3", "Curls")
    SIDE_PART = ("h4", "Side Part")


class HairColor(_Choice):
    BLACK = ("hc1", "Black")
    BROWN = ("hc2", "Brown")
    AUBURN = ("hc3", "Auburn")
    BLONDE = ("hc4", "Blonde")


class EyeStyle(_Choice):
    BRIGHT = ("e1", "Bright")
    RELAXED = ("e2", "Relaxed")


class BrowStyle(_Choice):
    ARCHED = ("b1", "Arched")
    SOFT = ("b2", "Soft")


class MouthStyle(_Choice):
    SMILE = ("m1", "Smile")
    NEUTRAL = ("m2", "Neutral")


class Outfit(_Choice):
    TEE = ("o1", "Tee")
    HOODIE = ("o2", "Hoodie")


class Shoes(_Choice):
    WHITE = ("sh1", "White")
    BLACK = ("sh2", "Black")


class Accessory(_Choice):
    NONE = ("a0", "None")
    GLASSES = ("a1", "Glasses")


# ---------------------------------------------------------------------------
# Habits
# ---------------------------------------------------------------------------

class TaskType(str, Enum):
    HABIT = "habit"
    SINGLE = "single"


class FrequencyUnit(str, Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ProofType(str, Enum):
    PHOTO = "photo"
    OVERRIDE = "override"


class ConditionTier(str, Enum):
    BAD = "bad"
    MEH = "meh"
    GOOD = "good"
    GREAT = "great"

    @staticmethod
    def from_score(score: float) -> "ConditionTier":
        if score < 25:
            return ConditionTier.BAD
        if score < 50:
            return ConditionTier.MEH
        if score < 75:
            return ConditionTier.GOOD
        return ConditionTier.GREAT
