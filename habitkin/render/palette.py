"""Palette resolver: recipe choices -> concrete colors by semantic role."""
from habitkin.domain.avatar import AvatarRecipe
from habitkin.domain.enums import SkinTone, HairColor, Outfit, Shoes

OUTLINE = "#1a1a1a"
SHADOW = "rgba(0,0,0,0.10)"
HIGHLIGHT = "rgba(255,255,255,0.25)"
PANTS = "#1F2937"
SCLERA = "#FFFFFF"
SPARKLE = "#FFFFFF"
LENS = "rgba(255,255,255,0.15)"
SHOE_SHADE = "rgba(0,0,0,0.12)"

SKIN_TONES = {
    SkinTone.S1: "#F7D7C4",
    SkinTone.S2: "#EFC3A4",
    SkinTone.S3: "#E2AD8C",
    SkinTone.S4: "#C98C6A",
    SkinTone.S5: "#A86A4B",
    SkinTone.S6: "#7E4A34",
}

HAIR_COLORS = {
    HairColor.BLACK: "#1E1B1A",
    HairColor.BROWN: "#4B2E24",
    HairColor.AUBURN: "#8B5A2B",
    HairColor.BLONDE: "#C9A26A",
}

OUTFIT_COLORS = {
    Outfit.TEE: "#2E5BFF",
    Outfit.HOODIE: "#111827",
}

OUTFIT_TRIM = {
    Outfit.TEE: "rgba(255,255,255,0.35)",
    Outfit.HOODIE: "rgba(255,255,255,0.25)",
}

SHOE_COLORS = {
    Shoes.WHITE: "#FFFFFF",
    Shoes.BLACK: "#111827",
}

# Eye color is not part of the recipe.
IRIS = "#8E5A2B"


def _check_total(table: dict, enum_cls) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"Palette has no {enum_cls.__name__} entry for {missing}")


for _table, _enum in (
    (SKIN_TONES, SkinTone),
    (HAIR_COLORS, HairColor),
    (OUTFIT_COLORS, Outfit),
    (OUTFIT_TRIM, Outfit),
    (SHOE_COLORS, Shoes),
):
    _check_total(_table, _enum)


def resolve_palette(recipe: AvatarRecipe) -> dict:
    """Map every semantic role to a color for this recipe."""
    return {
        "outline": OUTLINE,
        "shadow": SHADOW,
        "highlight": HIGHLIGHT,
        "skin": SKIN_TONES[recipe.skin],
        "hair": HAIR_COLORS[recipe.hair_color],
        "outfit": OUTFIT_COLORS[recipe.outfit],
        "outfit_trim": OUTFIT_TRIM[recipe.outfit],
        "pants": PANTS,
        "shoes": SHOE_COLORS[recipe.shoes],
        "shoe_shade": SHOE_SHADE,
        "iris": IRIS,
        "pupil": OUTLINE,
        "sclera": SCLERA,
        "sparkle": SPARKLE,
        "lens": LENS,
    }
