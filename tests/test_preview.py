"""Tests for preview reconciliation and live preview mode."""
import logging

import pytest

from scene_designer import (
    InMemorySceneHost,
    LivePreviewController,
    ObjectKind,
    PreviewReconciler,
    SceneConfig,
    compose,
)
from scene_designer.models import SceneObjectDescriptor


@pytest.fixture
def host():
    return InMemorySceneHost()


@pytest.fixture
def reconciler(host):
    return PreviewReconciler(host)


def _preview_names(host):
    return sorted(obj.name for obj in host.preview_objects())


class TestRefreshPreview:

    def test_refresh_creates_root_and_prefixed_objects(self, host, reconciler):
        descriptors = compose(SceneConfig())
        session = reconciler.refresh_preview(descriptors)

        assert len(session) == len(descriptors)
        assert host.get(session.root).name == "PREVIEW_SceneCreator"
        assert [host.get(h).name for h in session.handles] == [f"PREVIEW_{d.name}" for d in descriptors]
        assert all(host.get(h).parent == session.root for h in session.handles)
        assert len(host.preview_objects()) == len(descriptors) + 1

    def test_refresh_twice_is_idempotent(self, host, reconciler):
        descriptors = compose(SceneConfig(grid_size=6))
        reconciler.refresh_preview(descriptors)
        first = _preview_names(host)

        reconciler.refresh_preview(descriptors)

        assert _preview_names(host) == first
        assert len(host) == len(descriptors) + 1

    def test_refresh_with_fewer_descriptors_leaves_nothing_behind(self, host, reconciler):
        reconciler.refresh_preview(compose(SceneConfig(light_template="Lamp")))
        reconciler.refresh_preview(compose(SceneConfig(include_walls=False, include_lights=False)))

        assert _preview_names(host) == sorted(["PREVIEW_SceneCreator", "PREVIEW_Floor", "PREVIEW_Main_Camera"])

    def test_refresh_sweeps_orphaned_preview_objects(self, host, reconciler):
        # Left over from an earlier process that lost its session record
        orphan = host.create_container("PREVIEW_SceneCreator")
        host.create_container("PREVIEW_Floor", parent=orphan)

        reconciler.refresh_preview(compose(SceneConfig()))

        roots = [host.get(h).name for h in host.root_objects()]
        assert roots.count("PREVIEW_SceneCreator") == 1

    def test_preview_objects_are_not_persisted(self, host, reconciler):
        reconciler.refresh_preview(compose(SceneConfig()))
        assert host.snapshot()["roots"] == []

    def test_empty_descriptor_list(self, host, reconciler):
        session = reconciler.refresh_preview([])
        assert len(session) == 0
        assert _preview_names(host) == ["PREVIEW_SceneCreator"]

    def test_custom_prefix(self, host):
        reconciler = PreviewReconciler(host, prefix="GHOST_")
        session = reconciler.refresh_preview(compose(SceneConfig()))
        assert host.get(session.root).name == "GHOST_SceneCreator"


class TestClearPreview:

    def test_clear_removes_every_preview_object(self, host, reconciler):
        descriptors = compose(SceneConfig())
        reconciler.refresh_preview(descriptors)

        destroyed = reconciler.clear_preview()

        assert destroyed == len(descriptors) + 1
        assert host.preview_objects() == []
        assert not reconciler.is_active
        assert reconciler.session is None

    def test_clear_leaves_user_objects_alone(self, host, reconciler):
        keep = host.create_container("Environment")
        reconciler.refresh_preview(compose(SceneConfig()))

        reconciler.clear_preview()

        assert host.exists(keep)
        assert len(host) == 1

    def test_clear_without_session_sweeps_prefix(self, host, reconciler):
        host.create_container("PREVIEW_Stray")
        assert reconciler.clear_preview() == 1
        assert len(host) == 0

    def test_clear_twice(self, host, reconciler):
        reconciler.refresh_preview(compose(SceneConfig()))
        reconciler.clear_preview()
        assert reconciler.clear_preview() == 0


class TestTemplateFallback:

    def test_missing_template_falls_back_to_primitive(self, host, reconciler, caplog):
        caplog.set_level(logging.WARNING)
        session = reconciler.refresh_preview(compose(SceneConfig(light_template="Assets/Lamp.prefab")))

        lights = [host.get(h) for h in session.handles if host.get(h).kind is ObjectKind.LIGHT]
        assert len(lights) == 4
        assert all(obj.primitive == "directional_light" for obj in lights)
        assert all(obj.template_ref is None for obj in lights)
        assert "Assets/Lamp.prefab" in caplog.text

    def test_registered_template_is_instantiated(self, reconciler):
        host = reconciler.host
        host.register_template("Assets/Player.prefab")

        session = reconciler.refresh_preview(compose(SceneConfig(player_template="Assets/Player.prefab")))

        player = next(host.get(h) for h in session.handles if host.get(h).kind is ObjectKind.PLAYER)
        assert player.template_ref == "Assets/Player.prefab"
        assert player.primitive is None

    def test_fallback_does_not_stop_the_rest(self, host, reconciler):
        descriptors = [
            SceneObjectDescriptor(kind=ObjectKind.WALL, name="A", position=(0, 0, 0), template_ref="missing"),
            SceneObjectDescriptor(kind=ObjectKind.FLOOR, name="B", position=(0, 0, 0)),
        ]
        session = reconciler.refresh_preview(descriptors)
        assert [host.get(h).primitive for h in session.handles] == ["cube", "cube"]


class TestLivePreviewController:

    def test_tick_builds_once(self, reconciler):
        live = LivePreviewController(reconciler)
        assert live.tick() is True
        assert live.tick() is False
        assert reconciler.is_active

    def test_edits_between_ticks_coalesce(self, reconciler, monkeypatch):
        calls = []
        original = reconciler.refresh_preview

        def counting(descriptors):
            calls.append(len(descriptors))
            return original(descriptors)

        monkeypatch.setattr(reconciler, "refresh_preview", counting)
        live = LivePreviewController(reconciler)

        for size in (2, 3, 4, 5):
            live.update_config(SceneConfig(grid_size=size))
        live.tick()
        live.tick()

        assert len(calls) == 1
        walls = [
            reconciler.host.get(h) for h in reconciler.session.handles
            if reconciler.host.get(h).kind is ObjectKind.WALL
        ]
        assert walls[0].scale[0] == 5.0

    def test_live_off_clears_preview(self, host, reconciler):
        live = LivePreviewController(reconciler)
        live.tick()

        live.set_live(False)

        assert host.preview_objects() == []
        live.update_config(SceneConfig(grid_size=3))
        assert live.tick() is False
        assert host.preview_objects() == []

    def test_live_on_rebuilds_on_next_tick(self, reconciler):
        live = LivePreviewController(reconciler, live=False)
        assert live.tick() is False

        live.set_live(True)

        assert live.needs_refresh
        assert live.tick() is True

    def test_request_refresh(self, reconciler):
        live = LivePreviewController(reconciler)
        live.tick()
        live.request_refresh()
        assert live.tick() is True

    def test_subscribers_notified_until_unsubscribed(self, reconciler):
        live = LivePreviewController(reconciler)
        seen = []
        unsubscribe = live.subscribe(seen.append)

        live.update_config(SceneConfig(grid_size=2))
        unsubscribe()
        live.update_config(SceneConfig(grid_size=3))

        assert [c.grid_size for c in seen] == [2]

    def test_preview_camera_does_not_count_as_scene_camera(self, host, reconciler):
        live = LivePreviewController(reconciler)
        live.tick()
        live.request_refresh()
        live.tick()

        names = [host.get(h).name for h in reconciler.session.handles]
        assert "PREVIEW_Main_Camera" in names

    def test_scene_camera_suppresses_preview_camera(self, host, reconciler):
        camera = SceneObjectDescriptor(kind=ObjectKind.CAMERA, name="Main Camera", position=(0, 1, -10))
        host.create_primitive(camera, name="Main Camera", parent=None, preview=False)

        live = LivePreviewController(reconciler)
        live.tick()

        names = [host.get(h).name for h in reconciler.session.handles]
        assert "PREVIEW_Main_Camera" not in names

    def test_close_tears_down(self, host, reconciler):
        live = LivePreviewController(reconciler)
        seen = []
        live.subscribe(seen.append)
        live.tick()

        live.close()
        live.update_config(SceneConfig(grid_size=2))

        assert host.preview_objects() == []
        assert seen == []
