"""Unit tests for PlanCanvas display and mouse interaction."""

import asyncio

import pytest
from PySide6.QtCore import QPoint, Qt
from PySide6.QtTest import QTest

from home_configurator.configurator.assets import DirectoryAssetResolver
from home_configurator.configurator.compositor import Compositor, PillowImageLoader
from home_configurator.configurator.markup import MarkupLine
from home_configurator.core.models.selection import SelectionState
from home_configurator.gui.widgets.plan_canvas import ERASE, FREEHAND, LINE, PlanCanvas


@pytest.fixture
def scene(catalog, asset_dir):
    compositor = Compositor(catalog, SelectionState(), PillowImageLoader(DirectoryAssetResolver(asset_dir)))
    asyncio.run(compositor.render_floor(20))
    return compositor.scene


@pytest.fixture
def canvas(qtbot):
    widget = PlanCanvas()
    qtbot.addWidget(widget)
    widget.resize(1024, 768)
    widget.show()
    return widget


class TestShowScene:
    """Tests for scene display."""

    def test_show_scene_sets_canvas_sized_pixmap(self, canvas, scene):
        canvas.show_scene(scene, [MarkupLine(0, 0, 100, 100)])
        pixmap = canvas._item.pixmap()
        assert (pixmap.width(), pixmap.height()) == (1024, 768)

    def test_apply_viewport_mirrors_zoom_and_pan(self, canvas, scene, qtbot):
        canvas.show_scene(scene)
        scene.viewport.zoom_to_point(0, 0, 2.0)
        scene.viewport.pan(10, 20)

        with qtbot.waitSignal(canvas.viewportChanged):
            canvas.apply_viewport()

        transform = canvas.transform()
        assert transform.m11() == pytest.approx(2.0)
        assert (transform.dx(), transform.dy()) == pytest.approx((10, 20))


class TestMouse:
    """Tests for hotspot clicks, panning and the markup tools."""

    def test_click_on_hotspot_emits_key(self, canvas, scene, qtbot):
        canvas.show_scene(scene)
        with qtbot.waitSignal(canvas.hotspotClicked) as blocker:
            QTest.mouseClick(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(256, 332))
        assert blocker.args == ["25.0000,40.0000"]

    def test_drag_off_hotspot_pans(self, canvas, scene):
        canvas.show_scene(scene)
        QTest.mousePress(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(500, 600))
        QTest.mouseMove(canvas.viewport(), QPoint(530, 610))
        QTest.mouseRelease(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(530, 610))
        assert (scene.viewport.pan_x, scene.viewport.pan_y) == pytest.approx((30, 10))

    def test_line_tool_emits_line_in_scene_coordinates(self, canvas, scene, qtbot):
        canvas.show_scene(scene)
        scene.viewport.zoom_to_point(0, 0, 2.0)
        canvas.tool = LINE

        with qtbot.waitSignal(canvas.lineDrawn) as blocker:
            QTest.mousePress(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(100, 100))
            QTest.mouseRelease(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(300, 200))

        assert blocker.args == pytest.approx([50, 50, 150, 100])

    def test_freehand_tool_emits_every_point_in_scene_coordinates(self, canvas, scene, qtbot):
        canvas.show_scene(scene)
        scene.viewport.zoom_to_point(0, 0, 2.0)
        canvas.tool = FREEHAND

        with qtbot.waitSignal(canvas.pathDrawn) as blocker:
            QTest.mousePress(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(100, 100))
            QTest.mouseMove(canvas.viewport(), QPoint(140, 120))
            QTest.mouseMove(canvas.viewport(), QPoint(200, 100))
            QTest.mouseRelease(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(200, 160))

        points = blocker.args[0]
        assert points[0] == pytest.approx((50, 50))
        assert points[-1] == pytest.approx((100, 80))
        assert len(points) >= 2
        assert scene.viewport.pan_x == 0

    def test_freehand_tool_does_not_click_hotspots(self, canvas, scene, qtbot):
        canvas.show_scene(scene)
        canvas.tool = FREEHAND
        with qtbot.assertNotEmitted(canvas.hotspotClicked):
            QTest.mouseClick(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(256, 332))

    def test_erase_tool_emits_scene_point(self, canvas, scene, qtbot):
        canvas.show_scene(scene)
        scene.viewport.zoom_to_point(0, 0, 2.0)
        canvas.tool = ERASE

        with qtbot.waitSignal(canvas.eraseRequested) as blocker:
            QTest.mouseClick(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(60, 80))

        assert blocker.args == pytest.approx([30, 40])

    def test_click_without_scene_is_ignored(self, canvas, qtbot):
        with qtbot.assertNotEmitted(canvas.hotspotClicked):
            QTest.mouseClick(canvas.viewport(), Qt.MouseButton.LeftButton, pos=QPoint(10, 10))
