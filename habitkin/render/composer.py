"""Composer: stacks the layer fragments into one self-contained SVG."""
from habitkin.domain.avatar import AvatarRecipe
from habitkin.render.layers import (
    HEAD_CLIP_ID,
    layer_body,
    layer_hair_back,
    layer_face,
    layer_accessory,
    layer_hair_front,
    layer_outfit,
    layer_legs,
)
from habitkin.render.morph import morph_head_path
from habitkin.render.palette import resolve_palette
from habitkin.render.svg import SVG_NS, el, group, path, serialize

CANVAS_WIDTH = 320
CANVAS_HEIGHT = 520
VIEWBOX = f"0 0 {CANVAS_WIDTH} {CANVAS_HEIGHT}"

# Back to front.
LAYER_ORDER = (
    ("body", layer_body),
    ("hairBack", layer_hair_back),
    ("face", layer_face),
    ("accessory", layer_accessory),
    ("hairFront", layer_hair_front),
    ("outfit", layer_outfit),
    ("legs", layer_legs),
)

LAYER_NAMES = tuple(name for name, _ in LAYER_ORDER)


def _build_layers(recipe: AvatarRecipe) -> list:
    palette = resolve_palette(recipe)
    return [(name, generator(recipe, palette)) for name, generator in LAYER_ORDER]


def render_layers(recipe: AvatarRecipe) -> dict:
    """Serialized fragment per layer name, "" for an absent layer."""
    return {name: serialize(node) for name, node in _build_layers(recipe)}


def compose(recipe: AvatarRecipe, size: int | None = None):
    attrs = {"xmlns": SVG_NS, "viewBox": VIEWBOX, "role": "img", "aria-label": "Avatar"}
    if size is not None:
        if size <= 0:
            raise ValueError("size must be positive")
        attrs["width"] = size
        attrs["height"] = round(size * CANVAS_HEIGHT / CANVAS_WIDTH)

    defs = el(
        "defs", None,
        el("clipPath", {"id": HEAD_CLIP_ID}, path(morph_head_path(recipe))),
    )
    stack = group(
        None,
        *(node for _, node in _build_layers(recipe)),
        stroke_linecap="round",
        stroke_linejoin="round",
    )
    return el("svg", attrs, defs, stack)


def render_avatar_svg(recipe: AvatarRecipe, size: int | None = None) -> str:
    """The complete SVG document for a recipe. Same recipe, same bytes."""
    return serialize(compose(recipe, size))
