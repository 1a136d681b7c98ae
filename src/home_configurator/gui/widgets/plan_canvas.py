"""
Plan canvas: shows the compositor's scene with wheel zoom, drag pan,
hotspot clicks and the markup tools (line, freehand, erase).
"""
from __future__ import annotations

from typing import Iterable, List, Optional, Tuple

from PySide6.QtCore import QPointF, QRectF, Qt, Signal
from PySide6.QtGui import QBrush, QColor, QPainter, QTransform
from PySide6.QtWidgets import QGraphicsPixmapItem, QGraphicsScene, QGraphicsView

from home_configurator.configurator.compositor import Scene, flatten
from home_configurator.configurator.markup import MarkupItem
from home_configurator.gui.utils.images import pil_to_qpixmap


# Tools
PAN = "pan"
LINE = "line"
FREEHAND = "freehand"
ERASE = "erase"


class PlanCanvas(QGraphicsView):
    """
    Read-only view of a compositor Scene.

    The scene's ViewportTransform is the single source of truth for
    zoom and pan; this view only mirrors it into a QTransform.
    """

    hotspotClicked = Signal(str)
    lineDrawn = Signal(float, float, float, float)
    pathDrawn = Signal(object)
    eraseRequested = Signal(float, float)
    viewportChanged = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._graphics = QGraphicsScene(self)
        self._item = QGraphicsPixmapItem()
        self._graphics.addItem(self._item)
        self.setScene(self._graphics)

        self.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarPolicy.ScrollBarAlwaysOff)
        self.setTransformationAnchor(QGraphicsView.ViewportAnchor.NoAnchor)
        self.setAlignment(Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop)
        self.setBackgroundBrush(QBrush(QColor("#e0e0e0")))

        self._scene: Optional[Scene] = None
        self.tool = PAN
        self._drag_origin: Optional[QPointF] = None
        self._line_origin: Optional[QPointF] = None
        self._stroke: Optional[List[Tuple[float, float]]] = None

    # Display
    def show_scene(self, scene: Scene, markup: Iterable[MarkupItem] = ()) -> None:
        self._scene = scene
        self._item.setPixmap(pil_to_qpixmap(flatten(scene, markup)))
        width, height = scene.canvas_size
        self._graphics.setSceneRect(QRectF(0, 0, width, height))
        self.apply_viewport()

    def apply_viewport(self) -> None:
        if self._scene is None:
            return
        zoom, _, _, _, pan_x, pan_y = self._scene.viewport.as_matrix()
        self.setTransform(QTransform(zoom, 0, 0, zoom, pan_x, pan_y))
        self.viewportChanged.emit()

    # Interaction
    def wheelEvent(self, event):
        if self._scene is None:
            return
        pos = event.position()
        self._scene.viewport.wheel(-event.angleDelta().y(), pos.x(), pos.y())
        self.apply_viewport()
        event.accept()

    def mousePressEvent(self, event):
        if self._scene is None or event.button() != Qt.MouseButton.LeftButton:
            super().mousePressEvent(event)
            return
        pos = event.position()
        scene_x, scene_y = self._scene.viewport.to_scene(pos.x(), pos.y())
        if self.tool == LINE:
            self._line_origin = QPointF(scene_x, scene_y)
            return
        if self.tool == FREEHAND:
            self._stroke = [(scene_x, scene_y)]
            return
        if self.tool == ERASE:
            self.eraseRequested.emit(scene_x, scene_y)
            return
        key = self._scene.hotspot_at(scene_x, scene_y)
        if key is not None:
            self.hotspotClicked.emit(key)
            return
        self._drag_origin = pos
        self.setCursor(Qt.CursorShape.ClosedHandCursor)

    def mouseMoveEvent(self, event):
        if self._scene is not None and self._stroke is not None:
            pos = event.position()
            point = self._scene.viewport.to_scene(pos.x(), pos.y())
            if point != self._stroke[-1]:
                self._stroke.append(point)
            return
        if self._scene is not None and self._drag_origin is not None:
            pos = event.position()
            self._scene.viewport.pan(pos.x() - self._drag_origin.x(), pos.y() - self._drag_origin.y())
            self._drag_origin = pos
            self.apply_viewport()
            return
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self._stroke is not None and self._scene is not None:
            pos = event.position()
            point = self._scene.viewport.to_scene(pos.x(), pos.y())
            stroke, self._stroke = self._stroke, None
            if point != stroke[-1]:
                stroke.append(point)
            self.pathDrawn.emit(stroke)
            return
        if self._line_origin is not None and self._scene is not None:
            pos = event.position()
            x2, y2 = self._scene.viewport.to_scene(pos.x(), pos.y())
            origin = self._line_origin
            self._line_origin = None
            if (x2, y2) != (origin.x(), origin.y()):
                self.lineDrawn.emit(origin.x(), origin.y(), x2, y2)
            return
        if self._drag_origin is not None:
            self._drag_origin = None
            self.unsetCursor()
            return
        super().mouseReleaseEvent(event)
