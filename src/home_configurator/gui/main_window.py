"""
Main Window for the Home Configurator.
"""
from __future__ import annotations

import asyncio
import logging
import queue
from pathlib import Path

from PySide6.QtCore import Qt, QTimer
from PySide6.QtGui import QAction, QActionGroup, QColor, QKeySequence
from PySide6.QtWidgets import (
    QColorDialog,
    QFileDialog,
    QInputDialog,
    QMainWindow,
    QMessageBox,
    QSplitter,
    QStatusBar,
    QTabBar,
    QVBoxLayout,
    QWidget,
)

from home_configurator import __version__
from home_configurator.configurator.markup import DEFAULT_MARKUP_COLOR, MarkupLine, MarkupPath, MarkupText
from home_configurator.configurator.resolver import ApplyResult
from home_configurator.configurator.session import ConfiguratorSession
from home_configurator.gui.utils.logging_utils import attach_queue_handler, detach_queue_handler
from home_configurator.gui.widgets.gallery_dialog import GalleryDialog
from home_configurator.gui.widgets.option_panel import OptionPanel
from home_configurator.gui.widgets.plan_canvas import ERASE, FREEHAND, LINE, PAN, PlanCanvas

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    """
    Floor tabs across the top, the plan canvas in the middle and the
    option panel on the right. All state lives in the session.
    """

    def __init__(self, session: ConfiguratorSession):
        super().__init__()
        self.session = session

        model = session.catalog.model(session.model_id)
        self.setWindowTitle(f"Home Configurator - {model.name if model else session.model_id}")
        self.resize(1375, 900)
        self.pen_color = DEFAULT_MARKUP_COLOR
        self.pen_width = 3

        # --- Menu Bar ---
        file_menu = self.menuBar().addMenu("File")
        snapshot_action = QAction("Save Snapshot...", self)
        snapshot_action.triggered.connect(self._save_snapshot)
        file_menu.addAction(snapshot_action)
        review_action = QAction("Review Selections", self)
        review_action.triggered.connect(self._show_review)
        file_menu.addAction(review_action)
        file_menu.addSeparator()
        exit_action = QAction("Quit", self)
        exit_action.triggered.connect(self.close)
        file_menu.addAction(exit_action)

        edit_menu = self.menuBar().addMenu("Edit")
        self.undo_action = QAction("Undo", self)
        self.undo_action.setShortcut(QKeySequence.StandardKey.Undo)
        self.undo_action.triggered.connect(self._undo)
        edit_menu.addAction(self.undo_action)
        self.redo_action = QAction("Redo", self)
        self.redo_action.setShortcut(QKeySequence.StandardKey.Redo)
        self.redo_action.triggered.connect(self._redo)
        edit_menu.addAction(self.redo_action)
        edit_menu.addSeparator()
        self.tool_actions = {}
        tool_group = QActionGroup(self)
        for tool, label in ((PAN, "Pan"), (LINE, "Draw Lines"), (FREEHAND, "Freehand"), (ERASE, "Erase")):
            action = QAction(label, self)
            action.setCheckable(True)
            action.setChecked(tool == PAN)
            action.triggered.connect(lambda _checked=False, t=tool: self._set_tool(t))
            tool_group.addAction(action)
            edit_menu.addAction(action)
            self.tool_actions[tool] = action
        pen_color = QAction("Pen Color...", self)
        pen_color.triggered.connect(self._choose_pen_color)
        edit_menu.addAction(pen_color)
        pen_width = QAction("Pen Width...", self)
        pen_width.triggered.connect(self._choose_pen_width)
        edit_menu.addAction(pen_width)
        edit_menu.addSeparator()
        label_action = QAction("Add Label...", self)
        label_action.triggered.connect(self._add_label)
        edit_menu.addAction(label_action)
        self.delete_last_action = QAction("Delete Last Markup", self)
        self.delete_last_action.setShortcut(QKeySequence.StandardKey.Delete)
        self.delete_last_action.triggered.connect(self._delete_last_markup)
        edit_menu.addAction(self.delete_last_action)
        clear_action = QAction("Clear Markup", self)
        clear_action.triggered.connect(self._clear_markup)
        edit_menu.addAction(clear_action)

        view_menu = self.menuBar().addMenu("View")
        zoom_in = QAction("Zoom In", self)
        zoom_in.setShortcut(QKeySequence.StandardKey.ZoomIn)
        zoom_in.triggered.connect(lambda: self._zoom(1.2))
        view_menu.addAction(zoom_in)
        zoom_out = QAction("Zoom Out", self)
        zoom_out.setShortcut(QKeySequence.StandardKey.ZoomOut)
        zoom_out.triggered.connect(lambda: self._zoom(1 / 1.2))
        view_menu.addAction(zoom_out)
        reset_view = QAction("Reset View", self)
        reset_view.triggered.connect(self._reset_view)
        view_menu.addAction(reset_view)
        reload_images = QAction("Reload Images", self)
        reload_images.setShortcut(QKeySequence.StandardKey.Refresh)
        reload_images.triggered.connect(self._reload_images)
        view_menu.addAction(reload_images)
        show_all = QAction("Show All Options", self)
        show_all.triggered.connect(self._show_floor_panels)
        view_menu.addAction(show_all)

        help_menu = self.menuBar().addMenu("Help")
        about_action = QAction("About", self)
        about_action.triggered.connect(self._show_about)
        help_menu.addAction(about_action)

        # --- Logging ---
        self.log_queue: queue.Queue = queue.Queue()
        self._log_handler = attach_queue_handler(self.log_queue)
        self.log_timer = QTimer(self)
        self.log_timer.timeout.connect(self._drain_log_queue)
        self.log_timer.start(100)

        # --- Central Widget ---
        central = QWidget()
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(0, 0, 0, 0)

        self.floor_tabs = QTabBar()
        for floor in session.floors:
            self.floor_tabs.addTab(floor.name)
            self.floor_tabs.setTabData(self.floor_tabs.count() - 1, floor.id)
        self.floor_tabs.currentChanged.connect(self._on_floor_tab_changed)
        layout.addWidget(self.floor_tabs)

        self.canvas = PlanCanvas()
        self.canvas.hotspotClicked.connect(self._on_hotspot_clicked)
        self.canvas.lineDrawn.connect(self._on_line_drawn)
        self.canvas.pathDrawn.connect(self._on_path_drawn)
        self.canvas.eraseRequested.connect(self._on_erase_requested)
        self.option_panel = OptionPanel()
        self.option_panel.optionToggled.connect(self._on_option_toggled)
        self.option_panel.galleryRequested.connect(self._show_gallery)

        self.splitter = QSplitter(Qt.Orientation.Horizontal)
        self.splitter.addWidget(self.canvas)
        self.splitter.addWidget(self.option_panel)
        self.splitter.setStretchFactor(0, 4)
        self.splitter.setStretchFactor(1, 1)
        layout.addWidget(self.splitter)

        self.status_bar = QStatusBar()
        self.setStatusBar(self.status_bar)

        self._show_floor_panels()
        self.render()

    # ─────────────────────────────────────────────────────────────────────────
    # Rendering
    # ─────────────────────────────────────────────────────────────────────────

    def render(self) -> None:
        """Re-render the active floor and refresh dependent widgets."""
        asyncio.run(self.session.render_floor())
        self.canvas.show_scene(self.session.compositor.scene, self.session.markup.items)
        self.option_panel.refresh(self.session.selection)
        self._update_history_actions()

    def _repaint_markup(self) -> None:
        self.canvas.show_scene(self.session.compositor.scene, self.session.markup.items)
        self._update_history_actions()

    def _update_history_actions(self) -> None:
        self.undo_action.setEnabled(self.session.history.can_undo)
        self.redo_action.setEnabled(self.session.history.can_redo)
        self.delete_last_action.setEnabled(len(self.session.markup) > 0)

    # ─────────────────────────────────────────────────────────────────────────
    # Slots
    # ─────────────────────────────────────────────────────────────────────────

    def _on_floor_tab_changed(self, index: int) -> None:
        floor_id = self.floor_tabs.tabData(index)
        if floor_id is None:
            return
        self.session.set_floor(int(floor_id))
        self._show_floor_panels()
        self.render()

    def _show_floor_panels(self) -> None:
        self.option_panel.show_panels(self.session.floor_panels(), self.session.selection)

    def _on_hotspot_clicked(self, key: str) -> None:
        panels = self.session.hotspot_panels(key)
        if panels:
            title = panels[0].option_set.name if len(panels) == 1 else "Options"
            self.option_panel.show_panels(panels, self.session.selection, title)

    def _on_option_toggled(self, option_id: int) -> None:
        result = self.session.toggle(option_id)
        self._report(result)
        self.render()

    def _show_gallery(self, option_id: int) -> None:
        option = self.session.catalog.option(option_id)
        images = asyncio.run(self.session.load_gallery(option_id))
        GalleryDialog(f"{option.name} Gallery", images, self).exec()

    def _report(self, result: ApplyResult) -> None:
        if result.error is not None:
            QMessageBox.warning(self, "Selection", result.error.message)

    def _on_line_drawn(self, x1: float, y1: float, x2: float, y2: float) -> None:
        self.session.markup.add(MarkupLine(x1, y1, x2, y2, self.pen_color, self.pen_width))
        self._repaint_markup()

    def _on_path_drawn(self, points) -> None:
        self.session.markup.add(MarkupPath(tuple(points), self.pen_color, self.pen_width))
        self._repaint_markup()

    def _on_erase_requested(self, x: float, y: float) -> None:
        index = self.session.markup.index_at(x, y)
        if index is not None:
            self.session.markup.remove(index)
            self._repaint_markup()

    def _delete_last_markup(self) -> None:
        if self.session.markup.remove_last():
            self._repaint_markup()

    def _set_tool(self, tool: str) -> None:
        self.canvas.tool = tool

    def _choose_pen_color(self) -> None:
        color = QColorDialog.getColor(QColor(self.pen_color), self, "Pen Color")
        if color.isValid():
            self.pen_color = color.name()

    def _choose_pen_width(self) -> None:
        width, ok = QInputDialog.getInt(self, "Pen Width", "Width (px):", self.pen_width, 1, 40)
        if ok:
            self.pen_width = width

    def _add_label(self) -> None:
        text, ok = QInputDialog.getText(self, "Add Label", "Label text:")
        if ok and text:
            width, height = self.session.compositor.scene.canvas_size
            x, y = self.session.compositor.viewport.to_scene(width / 2, height / 2)
            self.session.markup.add(MarkupText(x, y, text, self.pen_color))
            self._repaint_markup()

    def _clear_markup(self) -> None:
        self.session.markup.clear()
        self._repaint_markup()

    def _undo(self) -> None:
        if self.session.undo():
            self._repaint_markup()

    def _redo(self) -> None:
        if self.session.redo():
            self._repaint_markup()

    def _zoom(self, factor: float) -> None:
        self.session.compositor.zoom_by(factor)
        self.canvas.apply_viewport()

    def _reset_view(self) -> None:
        self.session.compositor.reset_viewport()
        self.canvas.apply_viewport()

    def _reload_images(self) -> None:
        self.session.reload_images()
        self.render()

    def _save_snapshot(self) -> None:
        path, _ = QFileDialog.getSaveFileName(self, "Save Snapshot", "floor.png", "PNG Images (*.png)")
        if path:
            self.session.snapshot().save(Path(path))
            logger.info(f"Saved snapshot to {path}")

    def _show_review(self) -> None:
        lines = []
        for floor_summary in self.session.summary():
            lines.append(f"<h4>{floor_summary.floor.name}</h4><ul>")
            for set_summary in floor_summary.sets:
                names = ", ".join(o.name for o in set_summary.options)
                lines.append(f"<li><b>{set_summary.option_set.name}:</b> {names}</li>")
            lines.append("</ul>")
        QMessageBox.information(self, "Review Selections", "".join(lines) or "Nothing selected yet.")

    def _show_about(self):
        QMessageBox.about(
            self,
            "About Home Configurator",
            "<h3>Home Configurator</h3>"
            f"<p>Version: {__version__}</p>"
            "<p>Choose options floor by floor and preview them on the plan.</p>",
        )

    def _drain_log_queue(self):
        while True:
            try:
                message = self.log_queue.get_nowait()
            except queue.Empty:
                break
            self.status_bar.showMessage(message.text, message.timeout_ms)

    def closeEvent(self, event):
        self.log_timer.stop()
        detach_queue_handler(self._log_handler)
        super().closeEvent(event)
