"""Layer generators: one pure function per visual layer.

Every generator takes (recipe, palette) and returns a <g> element, or None
when the layer is empty. A generator only reads the recipe fields of its own
concern, so any layer can change without touching the others. Style choices
dispatch through tables keyed by enum member; the tables are total.
"""
from habitkin.domain.avatar import AvatarRecipe
from habitkin.domain.enums import (
    HairStyle,
    EyeStyle,
    BrowStyle,
    MouthStyle,
    Outfit,
    Accessory,
)
from habitkin.render.morph import CENTER_X, HEAD_CHIN, face_frame, morph_head_path
from habitkin.render.svg import circle, ellipse, fmt, group, path, rect, translate

HEAD_CLIP_ID = "headClip"

BROW_ANCHOR = 110.0
EYE_ANCHOR = 134.0
NOSE_ANCHOR = 156.0
MOUTH_ANCHOR = 178.0


def _outlined(p: dict, width: float = 4, **extra) -> dict:
    return {"stroke": p["outline"], "stroke_width": width, **extra}


def _stroke(color: str, width: float) -> dict:
    return {"fill": "none", "stroke": color, "stroke_width": width, "stroke_linecap": "round"}


def _scale_about_center(sx: float, dy: float) -> str | None:
    """Horizontal scale about the face centerline plus a vertical shift."""
    if sx == 1 and dy == 0:
        return None
    if sx == 1:
        return translate(0, dy)
    return f"translate({fmt(CENTER_X * (1 - sx))} {fmt(dy)}) scale({fmt(sx)} 1)"


# ---------------------------------------------------------------------------
# Body: head, ears, neck
# ---------------------------------------------------------------------------

def layer_body(recipe: AvatarRecipe, p: dict):
    frame = face_frame(recipe)
    chin = frame.chin_y
    left_dx, left_dy = frame.ear_offset("left")
    right_dx, right_dy = frame.ear_offset("right")

    neck = (
        f"M144 {fmt(chin - 10)} C144 214 176 214 176 {fmt(chin - 10)} "
        f"L176 {fmt(chin - 30)} C176 {fmt(chin - 38)} 144 {fmt(chin - 38)} 144 {fmt(chin - 30)} Z"
    )
    return group(
        "body",
        path(neck, fill=p["skin"], **_outlined(p)),
        path(
            "M102 132 C90 134 88 154 102 160 C114 166 120 154 118 144 C116 136 110 130 102 132 Z",
            fill=p["skin"], transform=translate(left_dx, left_dy), **_outlined(p),
        ),
        path(
            "M218 132 C230 134 232 154 218 160 C206 166 200 154 202 144 C204 136 210 130 218 132 Z",
            fill=p["skin"], transform=translate(right_dx, right_dy), **_outlined(p),
        ),
        path(morph_head_path(recipe), fill=p["skin"], **_outlined(p)),
        path(
            "M132 190 C146 206 174 206 188 190",
            transform=translate(0, chin - 200), **_stroke(p["shadow"], 12),
        ),
    )


# ---------------------------------------------------------------------------
# Hair (two passes: back volume behind the face, front cap over it)
# ---------------------------------------------------------------------------

def _back_cap(p: dict) -> list:
    return [
        path(
            "M112 100 C120 64 140 50 160 50 C180 50 200 64 208 100 "
            "C200 88 188 82 160 82 C132 82 120 88 112 100 Z",
            fill=p["hair"], **_outlined(p),
        ),
    ]


def _back_volume(p: dict) -> list:
    return [
        circle(110, 112, 18, fill=p["hair"], **_outlined(p)),
        circle(210, 112, 18, fill=p["hair"], **_outlined(p)),
        *_back_cap(p),
    ]


def _temples(p: dict) -> list:
    return [
        path(
            "M112 128 C112 112 120 104 132 104 C124 114 122 126 124 138 C118 138 114 134 112 128 Z",
            fill=p["hair"], **_outlined(p),
        ),
        path(
            "M208 128 C208 112 200 104 188 104 C196 114 198 126 196 138 C202 138 206 134 208 128 Z",
            fill=p["hair"], **_outlined(p),
        ),
    ]


def _front_classic(p: dict) -> list:
    return [
        *_temples(p),
        path(
            "M114 110 C124 78 144 64 160 64 C176 64 196 78 206 110 "
            "C194 96 182 90 160 90 C138 90 126 96 114 110 Z",
            fill=p["hair"], **_outlined(p),
        ),
        path("M130 88 C140 78 152 76 160 76 C174 76 188 82 196 88", **_stroke(p["highlight"], 6)),
    ]


def _front_sweep(p: dict) -> list:
    return [
        *_temples(p),
        path(
            "M114 112 C116 82 140 64 160 64 C180 64 204 82 206 112 "
            "C194 98 184 96 170 98 C154 100 146 112 132 110 C120 108 116 114 114 112 Z",
            fill=p["hair"], **_outlined(p),
        ),
    ]


def _front_curls(p: dict) -> list:
    return [
        *_temples(p),
        circle(130, 88, 12, fill=p["hair"], **_outlined(p)),
        circle(150, 78, 13, fill=p["hair"], **_outlined(p)),
        circle(176, 78, 13, fill=p["hair"], **_outlined(p)),
        circle(194, 88, 12, fill=p["hair"], **_outlined(p)),
        path("M118 114 C130 98 144 94 160 94 C176 94 190 98 202 114", fill=p["hair"], **_outlined(p)),
    ]


def _front_side_part(p: dict) -> list:
    return [
        *_temples(p),
        path(
            "M114 112 C124 78 146 62 160 62 C186 62 202 80 206 112 "
            "C194 92 176 86 164 88 C146 92 136 108 122 114 C118 116 116 116 114 112 Z",
            fill=p["hair"], **_outlined(p),
        ),
        path("M138 84 C150 74 170 74 190 82", **_stroke(p["highlight"], 6)),
    ]


HAIR_BACK_STYLES = {
    HairStyle.NONE: None,
    HairStyle.CLASSIC: _back_cap,
    HairStyle.SWEEP: _back_cap,
    HairStyle.CURLS: _back_volume,
    HairStyle.SIDE_PART: _back_cap,
}

HAIR_FRONT_STYLES = {
    HairStyle.NONE: None,
    HairStyle.CLASSIC: _front_classic,
    HairStyle.SWEEP: _front_sweep,
    HairStyle.CURLS: _front_curls,
    HairStyle.SIDE_PART: _front_side_part,
}


def _hair_transform(recipe: AvatarRecipe) -> str | None:
    if recipe.is_neutral_shape:
        return None
    frame = face_frame(recipe)
    return _scale_about_center(frame.temple_scale, frame.top_shift)


def layer_hair_back(recipe: AvatarRecipe, p: dict):
    template = HAIR_BACK_STYLES[recipe.hair]
    if template is None:
        return None
    return group("hairBack", *template(p), transform=_hair_transform(recipe))


def layer_hair_front(recipe: AvatarRecipe, p: dict):
    template = HAIR_FRONT_STYLES[recipe.hair]
    if template is None:
        return None
    # The clip lives on the outer group so it stays in canvas coordinates.
    return group(
        "hairFront",
        group(None, *template(p), transform=_hair_transform(recipe)),
        clip_path=f"url(#{HEAD_CLIP_ID})",
    )


# ---------------------------------------------------------------------------
# Face: brows, eyes, nose, mouth
# ---------------------------------------------------------------------------

def _brows_arched(p: dict) -> list:
    return [
        path("M120 110 C134 102 146 102 156 110", **_stroke(p["outline"], 4.5)),
        path("M164 110 C174 102 186 102 200 110", **_stroke(p["outline"], 4.5)),
    ]


def _brows_soft(p: dict) -> list:
    return [
        path("M120 114 C134 120 146 120 156 114", **_stroke(p["outline"], 4.5)),
        path("M164 114 C174 120 186 120 200 114", **_stroke(p["outline"], 4.5)),
    ]


def _eye_pair(p: dict, cy: float, rx: float, ry: float, iris_r: float, pupil_r: float,
              sparkle_r: float) -> list:
    return [
        ellipse(140, cy, rx, ry, fill=p["sclera"], **_outlined(p)),
        ellipse(180, cy, rx, ry, fill=p["sclera"], **_outlined(p)),
        circle(144, cy + 2, iris_r, fill=p["iris"]),
        circle(176, cy + 2, iris_r, fill=p["iris"]),
        circle(145.5, cy + 3, pupil_r, fill=p["pupil"]),
        circle(174.5, cy + 3, pupil_r, fill=p["pupil"]),
        circle(147.2, cy + 1.6, sparkle_r, fill=p["sparkle"]),
        circle(176.2, cy + 1.6, sparkle_r, fill=p["sparkle"]),
        path(f"M126 {fmt(cy - 2)} C134 {fmt(cy - 10)} 146 {fmt(cy - 10)} 154 {fmt(cy - 2)}",
             **_stroke(p["outline"], 4)),
        path(f"M166 {fmt(cy - 2)} C174 {fmt(cy - 10)} 186 {fmt(cy - 10)} 194 {fmt(cy - 2)}",
             **_stroke(p["outline"], 4)),
    ]


def _eyes_bright(p: dict) -> list:
    return _eye_pair(p, 134, 16, 12, 6.8, 4.2, 1.7)


def _eyes_relaxed(p: dict) -> list:
    return _eye_pair(p, 136, 15, 11, 6.2, 4, 1.6)


def _nose(p: dict) -> list:
    return [path("M156 154 C158 158 162 158 164 154", **_stroke(p["outline"], 4))]


def _mouth_smile(p: dict) -> list:
    return [path("M142 178 C150 186 170 186 178 178", **_stroke(p["outline"], 4))]


def _mouth_neutral(p: dict) -> list:
    return [path("M142 180 C150 176 170 176 178 180", **_stroke(p["outline"], 4))]


BROW_STYLES = {BrowStyle.ARCHED: _brows_arched, BrowStyle.SOFT: _brows_soft}
EYE_STYLES = {EyeStyle.BRIGHT: _eyes_bright, EyeStyle.RELAXED: _eyes_relaxed}
MOUTH_STYLES = {MouthStyle.SMILE: _mouth_smile, MouthStyle.NEUTRAL: _mouth_neutral}


def layer_face(recipe: AvatarRecipe, p: dict):
    frame = face_frame(recipe)
    return group(
        "face",
        group("brows", *BROW_STYLES[recipe.brows](p),
              transform=translate(0, frame.feature_offset(BROW_ANCHOR))),
        group("eyes", *EYE_STYLES[recipe.eyes](p),
              transform=translate(0, frame.feature_offset(EYE_ANCHOR))),
        group("nose", *_nose(p),
              transform=translate(0, frame.feature_offset(NOSE_ANCHOR))),
        group("mouth", *MOUTH_STYLES[recipe.mouth](p),
              transform=translate(0, frame.feature_offset(MOUTH_ANCHOR))),
    )


# ---------------------------------------------------------------------------
# Accessories
# ---------------------------------------------------------------------------

def _glasses(p: dict) -> list:
    return [
        rect(118, 124, 44, 28, rx=12, fill=p["lens"], **_outlined(p)),
        rect(158, 124, 44, 28, rx=12, fill=p["lens"], **_outlined(p)),
        path("M156 136 L164 136", **_stroke(p["outline"], 6)),
    ]


ACCESSORY_STYLES = {Accessory.NONE: None, Accessory.GLASSES: _glasses}


def layer_accessory(recipe: AvatarRecipe, p: dict):
    template = ACCESSORY_STYLES[recipe.accessory]
    if template is None:
        return None
    offset = face_frame(recipe).feature_offset(EYE_ANCHOR)
    return group("accessory", *template(p), transform=translate(0, offset))


# ---------------------------------------------------------------------------
# Outfit and legs
# ---------------------------------------------------------------------------

# Centerline top of the torso for a neutral head, just under the chin.
NECKLINE_Y = 194.0


def _torso(p: dict, top: float) -> list:
    # Shoulders move with the neckline; the hem stays on the legs at y=360.
    return [
        path(
            f"M88 {fmt(top + 32)} C112 {fmt(top + 8)} 136 {fmt(top)} 160 {fmt(top)} "
            f"C184 {fmt(top)} 208 {fmt(top + 8)} 232 {fmt(top + 32)} "
            "C248 244 256 268 256 298 C256 332 234 356 196 360 L124 360 "
            f"C86 356 64 332 64 298 C64 268 72 244 88 {fmt(top + 32)} Z",
            fill=p["outfit"], stroke_linejoin="round", **_outlined(p),
        ),
    ]


def _tee(p: dict, top: float) -> list:
    return [
        *_torso(p, top),
        path(f"M136 {fmt(top + 12)} C146 {fmt(top + 24)} 174 {fmt(top + 24)} 184 {fmt(top + 12)}",
             **_stroke(p["outfit_trim"], 6)),
    ]


def _hoodie(p: dict, top: float) -> list:
    return [
        *_torso(p, top),
        path(
            f"M122 {fmt(top + 40)} C122 {fmt(top + 22)} 140 {fmt(top + 10)} 160 {fmt(top + 10)} "
            f"C180 {fmt(top + 10)} 198 {fmt(top + 22)} 198 {fmt(top + 40)} "
            f"C186 {fmt(top + 32)} 176 {fmt(top + 30)} 160 {fmt(top + 30)} "
            f"C144 {fmt(top + 30)} 134 {fmt(top + 32)} 122 {fmt(top + 40)} Z",
            fill=p["outfit"], stroke_linejoin="round", **_outlined(p),
        ),
        path("M128 308 C140 330 180 330 192 308", **_stroke(p["outfit_trim"], 6)),
    ]


OUTFIT_STYLES = {Outfit.TEE: _tee, Outfit.HOODIE: _hoodie}


def neckline_y(recipe: AvatarRecipe) -> float:
    """Top edge of the outfit; follows the chin as faceLength changes."""
    return NECKLINE_Y + face_frame(recipe).chin_y - HEAD_CHIN


def layer_outfit(recipe: AvatarRecipe, p: dict):
    return group("outfit", *OUTFIT_STYLES[recipe.outfit](p, neckline_y(recipe)))


def layer_legs(recipe: AvatarRecipe, p: dict):
    # Only shoe color varies; p["shoes"] is resolved from recipe.shoes.
    return group(
        "legs",
        path("M120 360 L148 360 L150 470 L118 470 Z", fill=p["pants"], stroke_linejoin="round", **_outlined(p)),
        path("M172 360 L200 360 L202 470 L170 470 Z", fill=p["pants"], stroke_linejoin="round", **_outlined(p)),
        path("M104 470 C110 486 138 490 154 482 L154 470 Z", fill=p["shoes"], stroke_linejoin="round",
             **_outlined(p)),
        path("M166 470 C170 486 198 490 214 482 L214 470 Z", fill=p["shoes"], stroke_linejoin="round",
             **_outlined(p)),
        path("M114 476 C122 482 134 482 144 476", **_stroke(p["shoe_shade"], 5)),
        path("M176 476 C184 482 196 482 206 476", **_stroke(p["shoe_shade"], 5)),
    )


def _check_total(table: dict, enum_cls) -> None:
    missing = [member.value for member in enum_cls if member not in table]
    if missing:
        raise RuntimeError(f"No {enum_cls.__name__} template for {missing}")


for _table, _enum in (
    (HAIR_BACK_STYLES, HairStyle),
    (HAIR_FRONT_STYLES, HairStyle),
    (BROW_STYLES, BrowStyle),
    (EYE_STYLES, EyeStyle),
    (MOUTH_STYLES, MouthStyle),
    (ACCESSORY_STYLES, Accessory),
    (OUTFIT_STYLES, Outfit),
):
    _check_total(_table, _enum)
