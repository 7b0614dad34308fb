"""Continuous head-shape deformation driven by the recipe sliders.

The head outline is one canonical path. Each coordinate is pushed away from
(or toward) the face centerline by a blend of the cheek and jaw sliders, where
the blend depends on how far down the face the point sits, and is stretched
vertically around the face center by the face-length slider.

    t      = (y - HEAD_TOP) / (HEAD_CHIN - HEAD_TOP)
    cheek  = exp(-(t - CHEEK_PEAK)^2 / (2 * CHEEK_SPREAD^2))
    jaw    = t ** JAW_POWER
    x'     = CENTER_X + (x - CENTER_X) * (wc * cheekWidth + wj * jawWidth)
    y'     = CENTER_Y + (y - CENTER_Y) * faceLength
"""
import math
import re

from habitkin.domain.avatar import AvatarRecipe
from habitkin.domain.invariant import clamp
from habitkin.render.svg import fmt

CANONICAL_HEAD_PATH = (
    "M160 46 C126 46 100 74 100 116 C100 164 128 200 160 200 "
    "C192 200 220 164 220 116 C220 74 194 46 160 46 Z"
)

HEAD_TOP = 46.0
HEAD_CHIN = 200.0
CENTER_X = 160.0
CENTER_Y = (HEAD_TOP + HEAD_CHIN) / 2
FACE_HEIGHT = HEAD_CHIN - HEAD_TOP

CHEEK_PEAK = 0.55
CHEEK_SPREAD = 0.18
JAW_POWER = 2.5

# Features sit slightly low on a stretched face; nudge them by this fraction
# of the change in face height.
FEATURE_CENTERING = 0.06

TEMPLE_Y = 110.0
EAR_ANCHORS = {"left": (102.0, 146.0), "right": (218.0, 146.0)}

_TOKEN_RE = re.compile(r"[A-Za-z]|-?\d*\.?\d+(?:[eE][-+]?\d+)?")


def parse_path(d: str) -> list:
    """Parse an absolute path into [(command, [(x, y), ...]), ...]."""
    segments = []
    numbers = []
    command = None
    for token in _TOKEN_RE.findall(d):
        if token.isalpha():
            if command is not None:
                segments.append((command, _pairs(command, numbers)))
            command, numbers = token, []
        else:
            if command is None:
                raise ValueError("Path data must start with a command")
            numbers.append(float(token))
    if command is not None:
        segments.append((command, _pairs(command, numbers)))
    return segments


def _pairs(command: str, numbers: list) -> list:
    if command.islower():
        raise ValueError(f"Only absolute path commands are supported, got {command!r}")
    if len(numbers) % 2:
        raise ValueError(f"Odd number of coordinates after {command!r}")
    return [(numbers[i], numbers[i + 1]) for i in range(0, len(numbers), 2)]


def format_path(segments: list) -> str:
    parts = []
    for command, points in segments:
        coords = " ".join(f"{fmt(x)} {fmt(y)}" for x, y in points)
        parts.append(f"{command}{coords}")
    return " ".join(parts)


def basis_weights(y: float) -> tuple:
    """Normalized (cheek, jaw) weights for a point at height y."""
    t = clamp((y - HEAD_TOP) / FACE_HEIGHT, 0.0, 1.0)
    cheek = math.exp(-((t - CHEEK_PEAK) ** 2) / (2 * CHEEK_SPREAD ** 2))
    jaw = t ** JAW_POWER
    total = cheek + jaw
    if total == 0:
        return 1.0, 0.0
    return cheek / total, jaw / total


def width_scale(y: float, recipe: AvatarRecipe) -> float:
    # wc * cheek + wj * jaw with wc = 1 - wj; exact when both sliders agree.
    _, wj = basis_weights(y)
    return recipe.cheek_width + wj * (recipe.jaw_width - recipe.cheek_width)


def morph_point(x: float, y: float, recipe: AvatarRecipe) -> tuple:
    new_x = CENTER_X + (x - CENTER_X) * width_scale(y, recipe)
    new_y = CENTER_Y + (y - CENTER_Y) * recipe.face_length
    return new_x, new_y


def morph_head_path(recipe: AvatarRecipe) -> str:
    """The head outline for this recipe; the canonical path when neutral."""
    if recipe.is_neutral_shape:
        return CANONICAL_HEAD_PATH
    segments = [
        (command, [morph_point(x, y, recipe) for x, y in points])
        for command, points in parse_path(CANONICAL_HEAD_PATH)
    ]
    return format_path(segments)


class FaceFrame:
    """Derived head geometry that other layers position themselves against."""

    def __init__(self, recipe: AvatarRecipe):
        self._recipe = recipe
        self._length = recipe.face_length

    @property
    def chin_y(self) -> float:
        return CENTER_Y + (HEAD_CHIN - CENTER_Y) * self._length

    @property
    def top_shift(self) -> float:
        """How far the top of the scalp moved."""
        return (HEAD_TOP - CENTER_Y) * (self._length - 1)

    @property
    def temple_scale(self) -> float:
        return width_scale(TEMPLE_Y, self._recipe)

    def feature_offset(self, anchor_y: float) -> float:
        """Vertical shift for a facial feature anchored at anchor_y."""
        tracked = CENTER_Y + (anchor_y - CENTER_Y) * self._length - anchor_y
        return tracked + FEATURE_CENTERING * FACE_HEIGHT * (self._length - 1)

    def ear_offset(self, side: str) -> tuple:
        x, y = EAR_ANCHORS[side]
        new_x, new_y = morph_point(x, y, self._recipe)
        return new_x - x, new_y - y


def face_frame(recipe: AvatarRecipe) -> FaceFrame:
    return FaceFrame(recipe)
