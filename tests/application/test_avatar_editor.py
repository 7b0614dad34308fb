"""Tests for the avatar editor use case."""
import random
import threading

import pytest

from habitkin.application.avatar_editor import (
    AvatarEditor,
    STATUS_SAVED,
    STATUS_SAVE_IN_PROGRESS,
    random_recipe,
)
from habitkin.domain.avatar import AvatarRecipe, ENUM_FIELDS, SLIDER_FIELDS
from habitkin.domain.enums import SkinTone, HairStyle
from habitkin.render.composer import render_avatar_svg
from tests.conftest import FakeProfileStore, make_recipe, USER_ID


@pytest.fixture
def editor(profile_store):
    return AvatarEditor(profile_store, USER_ID, rng=random.Random(7))


class TestLoad:
    def test_missing_profile_gives_default(self, editor):
        assert editor.load() == AvatarRecipe.default()
        assert editor.status is None

    def test_stored_blob_is_loaded(self):
        blob = make_recipe(skin="s4", hair="h2").to_dict()
        editor = AvatarEditor(FakeProfileStore({USER_ID: blob}), USER_ID)
        assert editor.load().skin == SkinTone.S4

    def test_corrupt_blob_loaded_leniently(self):
        editor = AvatarEditor(FakeProfileStore({USER_ID: {"skin": "??", "hair": "h0"}}), USER_ID)
        r = editor.load()
        assert r.skin == SkinTone.S2
        assert r.hair == HairStyle.NONE

    def test_store_failure_falls_back_to_default(self):
        editor = AvatarEditor(FakeProfileStore(fail_load=True), USER_ID, initial=make_recipe(skin="s6"))
        assert editor.load() == AvatarRecipe.default()
        assert editor.status == "Profile service unavailable."


class TestEditing:
    def test_choose(self, editor):
        editor.choose("skin", "s4")
        assert editor.recipe.skin == SkinTone.S4

    def test_choose_returns_a_new_recipe(self, editor):
        before = editor.recipe
        after = editor.choose("hairColor", "hc3")
        assert before is not after
        assert before.hair_color.value == "hc2"

    def test_choose_unknown_value(self, editor):
        with pytest.raises(ValueError):
            editor.choose("skin", "s0")

    def test_choose_rejects_slider_field(self, editor):
        with pytest.raises(ValueError):
            editor.choose("faceLength", 1.2)

    def test_set_slider_clamps(self, editor):
        editor.set_slider("faceLength", 2.0)
        assert editor.recipe.face_length == 1.5

    def test_set_slider_rejects_choice_field(self, editor):
        with pytest.raises(ValueError):
            editor.set_slider("skin", 1.0)

    def test_reset(self, editor):
        editor.choose("outfit", "o2")
        assert editor.reset() == AvatarRecipe.default()

    def test_preview_renders_current_recipe(self, editor):
        editor.choose("accessory", "a1")
        assert editor.preview() == render_avatar_svg(editor.recipe)


class TestRandomize:
    def test_every_field_in_its_domain(self, editor):
        for _ in range(25):
            r = editor.randomize()
            for name, (_, enum_cls, _) in ENUM_FIELDS.items():
                assert getattr(r, name) in set(enum_cls)
            for name in SLIDER_FIELDS:
                value = getattr(r, name)
                assert 0.5 <= value <= 1.5
                assert round(value, 2) == value

    def test_seeded_is_reproducible(self):
        assert random_recipe(random.Random(42)) == random_recipe(random.Random(42))


class TestSave:
    def test_success(self, editor, profile_store):
        editor.choose("skin", "s3")
        assert editor.save() is True
        assert editor.status == STATUS_SAVED
        assert profile_store.blobs[USER_ID] == editor.recipe.to_dict()

    def test_failure_keeps_recipe(self):
        store = FakeProfileStore(fail_save=True)
        editor = AvatarEditor(store, USER_ID, initial=make_recipe(skin="s5"))
        assert editor.save() is False
        assert editor.status == "Profile service unavailable."
        assert editor.recipe.skin == SkinTone.S5
        assert editor.busy is False

    def test_no_retry_on_failure(self):
        store = FakeProfileStore(fail_save=True)
        AvatarEditor(store, USER_ID).save()
        assert store.save_calls == 1

    def test_concurrent_save_refused(self):
        entered = threading.Event()
        release = threading.Event()

        class SlowStore(FakeProfileStore):
            def save(self, user_id, blob):
                entered.set()
                release.wait(timeout=5)
                super().save(user_id, blob)

        store = SlowStore()
        editor = AvatarEditor(store, USER_ID)
        results = []
        worker = threading.Thread(target=lambda: results.append(editor.save()))
        worker.start()
        assert entered.wait(timeout=5)

        assert editor.busy is True
        assert editor.save() is False
        assert editor.status == STATUS_SAVE_IN_PROGRESS

        release.set()
        worker.join(timeout=5)
        assert results == [True]
        assert editor.status == STATUS_SAVED
        assert store.save_calls == 1
