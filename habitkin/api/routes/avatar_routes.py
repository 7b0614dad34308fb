"""Avatar API routes -- options, load, save, preview, randomize, SVG."""
import random
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import Response
from pydantic import BaseModel, Field

from habitkin.application.avatar_editor import AvatarEditor, random_recipe
from habitkin.domain.avatar import (
    AvatarRecipe,
    ENUM_FIELDS,
    SLIDER_FIELDS,
    SLIDER_MIN,
    SLIDER_MAX,
    SLIDER_NEUTRAL,
)
from habitkin.domain.enums import (
    SkinTone, HairStyle, HairColor, EyeStyle, BrowStyle, MouthStyle, Outfit, Shoes, Accessory,
)
from habitkin.infrastructure.audit import log_event
from habitkin.infrastructure.auth.dependencies import get_current_user_id
from habitkin.render.composer import render_avatar_svg

router = APIRouter(prefix="/api/avatar", tags=["avatar"])


def _one_of(enum_cls) -> str:
    return f"^({'|'.join(enum_cls.values())})$"


class AvatarRecipeRequest(BaseModel):
    """Recipe as sent by the editor. Missing fields take their defaults."""
    skin: str = Field(SkinTone.S2.value, pattern=_one_of(SkinTone))
    hair: str = Field(HairStyle.CLASSIC.value, pattern=_one_of(HairStyle))
    hairColor: str = Field(HairColor.BROWN.value, pattern=_one_of(HairColor))
    eyes: str = Field(EyeStyle.BRIGHT.value, pattern=_one_of(EyeStyle))
    brows: str = Field(BrowStyle.ARCHED.value, pattern=_one_of(BrowStyle))
    mouth: str = Field(MouthStyle.SMILE.value, pattern=_one_of(MouthStyle))
    outfit: str = Field(Outfit.TEE.value, pattern=_one_of(Outfit))
    shoes: str = Field(Shoes.WHITE.value, pattern=_one_of(Shoes))
    accessory: str = Field(Accessory.NONE.value, pattern=_one_of(Accessory))
    # Out-of-range sliders are clamped by the recipe, not rejected.
    faceLength: float = Field(SLIDER_NEUTRAL, allow_inf_nan=False)
    cheekWidth: float = Field(SLIDER_NEUTRAL, allow_inf_nan=False)
    jawWidth: float = Field(SLIDER_NEUTRAL, allow_inf_nan=False)

    def to_recipe(self) -> AvatarRecipe:
        return AvatarRecipe.default().replace(**self.model_dump())


class RandomizeRequest(BaseModel):
    seed: Optional[int] = None


_profile_store = None


def init_avatar_routes(profile_store):
    global _profile_store
    _profile_store = profile_store


def _payload(recipe: AvatarRecipe, status: str | None = None) -> dict:
    return {"recipe": recipe.to_dict(), "svg": render_avatar_svg(recipe), "status": status}


@router.get("/options")
def api_avatar_options():
    """Choice domains with labels, slider range and defaults. Public."""
    return {
        "choices": {
            key: [{"value": m.value, "label": m.label} for m in enum_cls]
            for key, enum_cls, _ in ENUM_FIELDS.values()
        },
        "sliders": {
            key: {"min": SLIDER_MIN, "max": SLIDER_MAX, "default": SLIDER_NEUTRAL}
            for key in SLIDER_FIELDS.values()
        },
        "defaults": AvatarRecipe.default().to_dict(),
    }


@router.get("")
def api_get_avatar(user_id: str = Depends(get_current_user_id)):
    """The user's saved recipe, or the default when none (or the store is down)."""
    editor = AvatarEditor(_profile_store, user_id)
    recipe = editor.load()
    return _payload(recipe, editor.status)


@router.put("")
def api_save_avatar(req: AvatarRecipeRequest, user_id: str = Depends(get_current_user_id)):
    try:
        recipe = req.to_recipe()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    editor = AvatarEditor(_profile_store, user_id, initial=recipe)
    if not editor.save():
        raise HTTPException(status_code=502, detail=editor.status)

    log_event("avatar_saved", user_id, recipe.to_dict())
    return _payload(editor.recipe, editor.status)


@router.post("/preview")
def api_preview_avatar(req: AvatarRecipeRequest):
    """Render any recipe without saving it. Public."""
    try:
        recipe = req.to_recipe()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _payload(recipe)


@router.post("/randomize")
def api_randomize_avatar(req: Optional[RandomizeRequest] = None):
    """A random recipe; the same seed always gives the same recipe. Public."""
    seed = req.seed if req else None
    recipe = random_recipe(random.Random(seed))
    return _payload(recipe)


@router.get("/svg")
def api_avatar_svg(
    size: Optional[int] = Query(None, ge=16, le=2048),
    user_id: str = Depends(get_current_user_id),
):
    """The user's avatar as an SVG image."""
    editor = AvatarEditor(_profile_store, user_id)
    recipe = editor.load()
    return Response(
        content=render_avatar_svg(recipe, size),
        media_type="image/svg+xml",
        headers={"Cache-Control": "no-store"},
    )
