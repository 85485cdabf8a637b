"""
Tests for the application shell and visualization
==================================================
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from airspray.detection.hand_detector import HandTracker
from airspray.main import AppConfig, SprayApplication, WindowConfig, create_app_config, load_config
from airspray.utils.visualization import Visualizer, VisualizerConfig

PINCH = dict(thumb_tip=(0.5, 0.5), index_tip=(0.51, 0.5), wrist=(0.5, 0.6), middle_mcp=(0.5, 0.55))


@pytest.fixture
def app():
    config = AppConfig(window=WindowConfig(width=640, height=360), seed=3)
    return SprayApplication(config, tracker=MagicMock(spec=HandTracker))


class TestConfig:

    def test_defaults(self):
        config = create_app_config({})

        assert config.camera.width == 1280
        assert config.tracker.max_num_hands == 1
        assert config.tracker.model_complexity == 1
        assert config.tracker.min_detection_confidence == 0.7
        assert config.tracker.min_tracking_confidence == 0.7
        assert config.window.title == "AirSpray"
        assert config.seed is None

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "camera:\n  device_id: 2\n"
            "tracker:\n  backend: solutions\n"
            "window:\n  width: 800\n  height: 600\n"
            "performance:\n  target_fps: 60\n"
            "spray:\n  seed: 9\n"
            "logging:\n  level: DEBUG\n"
        )

        config = create_app_config(load_config(path))

        assert config.camera.device_id == 2
        assert config.tracker.backend == "solutions"
        assert (config.window.width, config.window.height) == (800, 600)
        assert config.target_fps == 60
        assert config.seed == 9
        assert config.log_level == "DEBUG"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert load_config(path) == {}


class TestInputHandling:

    def test_click_elsewhere_cycles(self, app):
        for _ in range(9):
            app.handle_click(5, 5)

        assert app.palette.index == 9 % 7

    def test_click_on_swatch_selects(self, app):
        x, y, w, h = app.visualizer.swatch_rects(640, 360)[4]

        app.handle_click(x + w // 2, y + h // 2)

        assert app.palette.index == 4

    def test_space_clears(self, app):
        app.canvas.fill_circle((100, 100), 20, (0, 0, 255, 255))

        app.handle_key(ord(' '))

        assert app.canvas.coverage() == 0

    @pytest.mark.parametrize("key", [ord('q'), 27])
    def test_quit_keys(self, app, key):
        app._running = True

        app.handle_key(key)

        assert not app._running

    def test_resize_reallocates(self, app):
        app.canvas.fill_circle((100, 100), 20, (0, 0, 255, 255))

        app.handle_resize(320, 240)

        assert app.canvas.size == (320, 240)
        assert app.canvas.coverage() == 0

    def test_same_or_invalid_size_keeps_paint(self, app):
        app.canvas.fill_circle((100, 100), 20, (0, 0, 255, 255))

        app.handle_resize(640, 360)
        app.handle_resize(-1, -1)

        assert app.canvas.coverage() > 0


class TestLifecycle:

    def test_start_without_tracking_capability(self):
        app = SprayApplication(AppConfig())
        with patch("airspray.main.resolve_hand_tracker", return_value=None):
            assert app.start() is False
        assert app.source is None

    def test_start_without_camera_still_runs(self, app):
        with patch.object(app.camera, "start", return_value=False):
            assert app.start() is True

        assert app._running
        with patch("airspray.main.cv2.destroyAllWindows"):
            app.stop()
        app.tracker.close.assert_called_once()

    def test_render_frame_without_camera(self, app, make_hand):
        app.slot.publish(make_hand(**PINCH))

        image = app.render_frame()

        assert image.shape == (360, 640, 3)
        assert app.canvas.coverage() > 0

    def test_render_frame_with_no_hand_paints_nothing(self, app):
        image = app.render_frame()

        assert image.shape == (360, 640, 3)
        assert app.canvas.coverage() == 0


class TestVisualizer:

    @pytest.fixture
    def viz(self):
        return Visualizer(VisualizerConfig(show_fps=False, show_instructions=False))

    def test_preview_is_mirrored_and_dimmed(self, viz):
        frame = np.zeros((2, 4, 3), dtype=np.uint8)
        frame[:, 0] = 200

        out = viz.preview(frame, 4, 2)

        assert out[0, 3, 0] == 100
        assert out[0, 0, 0] == 0

    def test_preview_without_frame_is_black(self, viz):
        out = viz.preview(None, 64, 48)

        assert out.shape == (48, 64, 3)
        assert not out.any()

    def test_preview_scaled_to_canvas(self, viz):
        out = viz.preview(np.full((720, 1280, 3), 10, dtype=np.uint8), 300, 300)

        assert out.shape == (300, 300, 3)

    def test_swatch_hit_testing(self, viz):
        rects = viz.swatch_rects(640, 360)

        assert len(rects) == 7
        for index, (x, y, w, h) in enumerate(rects):
            assert viz.swatch_at(x + 1, y + 1, 640, 360) == index
        assert viz.swatch_at(0, 0, 640, 360) is None

    def test_instructions_screen(self, viz):
        image = viz.instructions_screen(640, 360, "Hand tracking unavailable")

        assert image.shape == (360, 640, 3)
        assert image.any()
