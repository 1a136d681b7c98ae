"""
Option panel: the option sets of the active floor (or of a clicked
hotspot) as checkable lists. The current option can open its
design gallery.
"""
from __future__ import annotations

from typing import List

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QLabel, QListWidget, QListWidgetItem, QPushButton, QVBoxLayout, QWidget

from home_configurator.configurator.hotspots import HotspotPanel
from home_configurator.core.models.selection import SelectionState

OPTION_ID_ROLE = Qt.ItemDataRole.UserRole
GALLERY_COUNT_ROLE = Qt.ItemDataRole.UserRole + 1


class OptionPanel(QWidget):
    """
    Emits optionToggled(option_id) when the user clicks an option and
    galleryRequested(option_id) from the View Gallery button, which is
    enabled while the current option has gallery images.
    """

    optionToggled = Signal(int)
    galleryRequested = Signal(int)

    def __init__(self, parent=None):
        super().__init__(parent)
        self.layout = QVBoxLayout(self)
        self.layout.setContentsMargins(8, 8, 8, 8)
        self.title = QLabel("Options")
        self.title.setStyleSheet("font-weight: bold;")
        self.list = QListWidget()
        self.list.itemClicked.connect(self._on_item_clicked)
        self.list.currentItemChanged.connect(self._update_gallery_button)
        self.gallery_button = QPushButton("View Gallery")
        self.gallery_button.setEnabled(False)
        self.gallery_button.clicked.connect(self._request_gallery)
        self.layout.addWidget(self.title)
        self.layout.addWidget(self.list)
        self.layout.addWidget(self.gallery_button)
        self._panels: List[HotspotPanel] = []

    def show_panels(self, panels: List[HotspotPanel], selection: SelectionState, title: str = "Options") -> None:
        self._panels = list(panels)
        self.title.setText(title)
        self.refresh(selection)

    def refresh(self, selection: SelectionState) -> None:
        """Rebuild the list so check marks follow the selection."""
        current = self.list.currentItem()
        current_id = current.data(OPTION_ID_ROLE) if current is not None else None
        self.list.clear()
        for panel in self._panels:
            header = QListWidgetItem(panel.option_set.name)
            header.setFlags(Qt.ItemFlag.NoItemFlags)
            font = header.font()
            font.setBold(True)
            header.setFont(font)
            self.list.addItem(header)
            for option in panel.options:
                label = f"{option.name} ({option.code})" if option.code else option.name
                item = QListWidgetItem(label)
                item.setData(OPTION_ID_ROLE, option.id)
                if option.gallery_images:
                    count = len(option.gallery_images)
                    item.setData(GALLERY_COUNT_ROLE, count)
                    item.setToolTip(f"{count} gallery image(s)")
                item.setFlags(Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable | Qt.ItemFlag.ItemIsUserCheckable)
                checked = selection.is_selected(option.id)
                item.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
                self.list.addItem(item)
                if option.id == current_id:
                    self.list.setCurrentItem(item)
        self._update_gallery_button()

    def _on_item_clicked(self, item: QListWidgetItem) -> None:
        option_id = item.data(OPTION_ID_ROLE)
        if option_id is not None:
            self.optionToggled.emit(int(option_id))

    def _update_gallery_button(self, *_args) -> None:
        item = self.list.currentItem()
        self.gallery_button.setEnabled(item is not None and bool(item.data(GALLERY_COUNT_ROLE)))

    def _request_gallery(self) -> None:
        item = self.list.currentItem()
        if item is not None and item.data(GALLERY_COUNT_ROLE):
            self.galleryRequested.emit(int(item.data(OPTION_ID_ROLE)))

