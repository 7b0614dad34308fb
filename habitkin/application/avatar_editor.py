"""Use case: edit, preview and persist a user's avatar recipe."""
import logging
import random
import threading

from habitkin.domain.avatar import (
    AvatarRecipe,
    ENUM_FIELDS,
    SLIDER_FIELDS,
    SLIDER_MIN,
    SLIDER_MAX,
    field_for_key,
)
from habitkin.infrastructure.repositories.errors import ProfileStoreError
from habitkin.render.composer import render_avatar_svg

logger = logging.getLogger("habitkin.avatar")

STATUS_SAVED = "Saved."
STATUS_SAVE_IN_PROGRESS = "Save already in progress."
STATUS_SAVE_FAILED = "Could not save your avatar."
STATUS_LOAD_FAILED = "Could not load your avatar."


def random_recipe(rng: random.Random | None = None) -> AvatarRecipe:
    """Uniform pick over every choice domain; sliders to two decimals."""
    rng = rng or random.Random()
    values = {name: rng.choice(list(enum_cls)) for name, (_, enum_cls, _) in ENUM_FIELDS.items()}
    for name in SLIDER_FIELDS:
        values[name] = round(rng.uniform(SLIDER_MIN, SLIDER_MAX), 2)
    return AvatarRecipe(**values)


class AvatarEditor:
    """Holds one user's working recipe between edits and saves.

    The profile store is anything with load(user_id) -> dict | None and
    save(user_id, blob) that raises ProfileStoreError on failure.
    """

    def __init__(self, profile_store, user_id: str, initial: AvatarRecipe | None = None,
                 rng: random.Random | None = None):
        self._store = profile_store
        self._user_id = user_id
        self._recipe = initial or AvatarRecipe.default()
        self._rng = rng or random.Random()
        self._status = None
        self._save_lock = threading.Lock()

    # --- Properties (Read-Only) ---

    @property
    def recipe(self) -> AvatarRecipe:
        return self._recipe

    @property
    def status(self) -> str | None:
        return self._status

    @property
    def busy(self) -> bool:
        return self._save_lock.locked()

    # --- Editing ---

    def load(self) -> AvatarRecipe:
        try:
            blob = self._store.load(self._user_id)
        except ProfileStoreError as exc:
            logger.warning("Avatar load failed for %s: %s", self._user_id, exc)
            self._status = str(exc) or STATUS_LOAD_FAILED
            self._recipe = AvatarRecipe.default()
            return self._recipe
        self._recipe = AvatarRecipe.from_dict(blob)
        return self._recipe

    def choose(self, field: str, value) -> AvatarRecipe:
        name = field_for_key(field)
        if name not in ENUM_FIELDS:
            raise ValueError(f"{field} is not a choice field")
        self._recipe = self._recipe.replace(**{name: value})
        return self._recipe

    def set_slider(self, field: str, value) -> AvatarRecipe:
        name = field_for_key(field)
        if name not in SLIDER_FIELDS:
            raise ValueError(f"{field} is not a slider")
        self._recipe = self._recipe.replace(**{name: value})
        return self._recipe

    def randomize(self) -> AvatarRecipe:
        self._recipe = random_recipe(self._rng)
        return self._recipe

    def reset(self) -> AvatarRecipe:
        self._recipe = AvatarRecipe.default()
        return self._recipe

    def preview(self, size: int | None = None) -> str:
        return render_avatar_svg(self._recipe, size)

    # --- Persistence ---

    def save(self) -> bool:
        """Persist the working recipe. Returns True on success."""
        if not self._save_lock.acquire(blocking=False):
            self._status = STATUS_SAVE_IN_PROGRESS
            return False
        try:
            self._store.save(self._user_id, self._recipe.to_dict())
        except ProfileStoreError as exc:
            logger.warning("Avatar save failed for %s: %s", self._user_id, exc)
            self._status = str(exc) or STATUS_SAVE_FAILED
            return False
        finally:
            self._save_lock.release()
        self._status = STATUS_SAVED
        logger.info("Avatar saved for %s", self._user_id)
        return True
