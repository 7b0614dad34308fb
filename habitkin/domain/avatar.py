"""
Domain Layer: Avatar Recipe.

A recipe is the complete, closed description of one avatar. Every enumerated
field belongs to its enum; every slider is clamped to SLIDER_MIN..SLIDER_MAX.
Recipes are values: changing a field produces a new recipe.
"""
import logging

from habitkin.domain.enums import (
    SkinTone,
    HairStyle,
    HairColor,
    EyeStyle,
    BrowStyle,
    MouthStyle,
    Outfit,
    Shoes,
    Accessory,
)
from habitkin.domain.invariant import clamp, require_number

logger = logging.getLogger("habitkin.avatar")

SLIDER_MIN = 0.5
SLIDER_MAX = 1.5
SLIDER_NEUTRAL = 1.0

# attribute name -> (blob key, enum, default)
ENUM_FIELDS = {
    "skin": ("skin", SkinTone, SkinTone.S2),
    "hair": ("hair", HairStyle, HairStyle.CLASSIC),
    "hair_color": ("hairColor", HairColor, HairColor.BROWN),
    "eyes": ("eyes", EyeStyle, EyeStyle.BRIGHT),
    "brows": ("brows", BrowStyle, BrowStyle.ARCHED),
    "mouth": ("mouth", MouthStyle, MouthStyle.SMILE),
    "outfit": ("outfit", Outfit, Outfit.TEE),
    "shoes": ("shoes", Shoes, Shoes.WHITE),
    "accessory": ("accessory", Accessory, Accessory.NONE),
}

# attribute name -> blob key
SLIDER_FIELDS = {
    "face_length": "faceLength",
    "cheek_width": "cheekWidth",
    "jaw_width": "jawWidth",
}

_BLOB_KEYS = {key: attr for attr, (key, _, _) in ENUM_FIELDS.items()}
_BLOB_KEYS.update({key: attr for attr, key in SLIDER_FIELDS.items()})


def field_for_key(key: str) -> str:
    """Map an attribute name or blob key to the attribute name."""
    if key in ENUM_FIELDS or key in SLIDER_FIELDS:
        return key
    if key in _BLOB_KEYS:
        return _BLOB_KEYS[key]
    raise ValueError(f"Unknown avatar field: {key}")


class AvatarRecipe:
    """Immutable avatar description."""

    __slots__ = tuple(f"_{name}" for name in (*ENUM_FIELDS, *SLIDER_FIELDS))

    def __init__(
        self,
        skin=SkinTone.S2,
        hair=HairStyle.CLASSIC,
        hair_color=HairColor.BROWN,
        eyes=EyeStyle.BRIGHT,
        brows=BrowStyle.ARCHED,
        mouth=MouthStyle.SMILE,
        outfit=Outfit.TEE,
        shoes=Shoes.WHITE,
        accessory=Accessory.NONE,
        face_length: float = SLIDER_NEUTRAL,
        cheek_width: float = SLIDER_NEUTRAL,
        jaw_width: float = SLIDER_NEUTRAL,
    ):
        given = locals()
        for name, (_, enum_cls, _) in ENUM_FIELDS.items():
            value = given[name]
            try:
                member = enum_cls(value)
            except ValueError:
                raise ValueError(
                    f"{name} must be one of {enum_cls.values()}, got {value!r}"
                ) from None
            object.__setattr__(self, f"_{name}", member)
        for name in SLIDER_FIELDS:
            value = require_number(given[name], name)
            object.__setattr__(self, f"_{name}", clamp(value, SLIDER_MIN, SLIDER_MAX))

    def __setattr__(self, name, value):
        raise AttributeError("AvatarRecipe is immutable; use replace()")

    # --- Properties (Read-Only) ---

    @property
    def skin(self) -> SkinTone:
        return self._skin

    @property
    def hair(self) -> HairStyle:
        return self._hair

    @property
    def hair_color(self) -> HairColor:
        return self._hair_color

    @property
    def eyes(self) -> EyeStyle:
        return self._eyes

    @property
    def brows(self) -> BrowStyle:
        return self._brows

    @property
    def mouth(self) -> MouthStyle:
        return self._mouth

    @property
    def outfit(self) -> Outfit:
        return self._outfit

    @property
    def shoes(self) -> Shoes:
        return self._shoes

    @property
    def accessory(self) -> Accessory:
        return self._accessory

    @property
    def face_length(self) -> float:
        return self._face_length

    @property
    def cheek_width(self) -> float:
        return self._cheek_width

    @property
    def jaw_width(self) -> float:
        return self._jaw_width

    @property
    def is_neutral_shape(self) -> bool:
        """True when every slider sits at its neutral value."""
        return all(getattr(self, name) == SLIDER_NEUTRAL for name in SLIDER_FIELDS)

    # --- Construction ---

    @classmethod
    def default(cls) -> "AvatarRecipe":
        return cls()

    def replace(self, **changes) -> "AvatarRecipe":
        """Return a new recipe with the given fields changed."""
        values = self._as_kwargs()
        for key, value in changes.items():
            values[field_for_key(key)] = value
        return AvatarRecipe(**values)

    @classmethod
    def from_dict(cls, blob) -> "AvatarRecipe":
        """Lenient loader for stored blobs.

        Missing or unknown enum values fall back to the field default and
        sliders are clamped. Anything that is not a mapping yields the
        default recipe.
        """
        if not isinstance(blob, dict):
            if blob is not None:
                logger.warning("Ignoring non-object avatar blob: %r", type(blob).__name__)
            return cls()

        values = {}
        for name, (key, enum_cls, default) in ENUM_FIELDS.items():
            raw = blob.get(key, blob.get(name))
            if raw is None:
                values[name] = default
                continue
            try:
                values[name] = enum_cls(raw)
            except ValueError:
                logger.warning("Unknown %s %r in stored avatar; using %s", key, raw, default.value)
                values[name] = default
        for name, key in SLIDER_FIELDS.items():
            raw = blob.get(key, blob.get(name))
            try:
                values[name] = require_number(raw, name) if raw is not None else SLIDER_NEUTRAL
            except ValueError:
                logger.warning("Non-numeric %s %r in stored avatar; using neutral", key, raw)
                values[name] = SLIDER_NEUTRAL
        return cls(**values)

    # --- Serialization ---

    def to_dict(self) -> dict:
        data = {}
        for name, (key, _, _) in ENUM_FIELDS.items():
            data[key] = getattr(self, name).value
        for name, key in SLIDER_FIELDS.items():
            data[key] = getattr(self, name)
        return data

    def _as_kwargs(self) -> dict:
        return {name: getattr(self, name) for name in (*ENUM_FIELDS, *SLIDER_FIELDS)}

    # --- Value semantics ---

    def __eq__(self, other) -> bool:
        if not isinstance(other, AvatarRecipe):
            return NotImplemented
        return self._as_kwargs() == other._as_kwargs()

    def __hash__(self) -> int:
        return hash(tuple(self._as_kwargs().values()))

    def __repr__(self) -> str:
        return f"AvatarRecipe({self.to_dict()!r})"
