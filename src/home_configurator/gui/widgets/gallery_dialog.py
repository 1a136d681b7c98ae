"""
Gallery dialog: an option's design images, one at a time with
previous/next stepping and a position counter.
"""
from __future__ import annotations

from typing import List, Tuple

from PIL import Image
from PySide6.QtCore import Qt
from PySide6.QtWidgets import QDialog, QHBoxLayout, QLabel, QPushButton, QVBoxLayout

from home_configurator.gui.utils.images import pil_to_qpixmap

MAX_IMAGE_SIZE = (800, 600)


class GalleryDialog(QDialog):
    """Steps through (identifier, image) pairs; wraps at both ends."""

    def __init__(self, title: str, images: List[Tuple[str, Image.Image]], parent=None):
        super().__init__(parent)
        self.setWindowTitle(title)
        self._images = list(images)
        self.index = 0

        layout = QVBoxLayout(self)
        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.image_label.setMinimumSize(320, 240)
        layout.addWidget(self.image_label)

        nav = QHBoxLayout()
        self.prev_button = QPushButton("Previous")
        self.prev_button.clicked.connect(lambda: self.step(-1))
        self.counter = QLabel()
        self.counter.setAlignment(Qt.AlignmentFlag.AlignCenter)
        self.next_button = QPushButton("Next")
        self.next_button.clicked.connect(lambda: self.step(1))
        nav.addWidget(self.prev_button)
        nav.addWidget(self.counter, 1)
        nav.addWidget(self.next_button)
        layout.addLayout(nav)

        several = len(self._images) > 1
        self.prev_button.setEnabled(several)
        self.next_button.setEnabled(several)
        self._show_current()

    def step(self, delta: int) -> None:
        if not self._images:
            return
        self.index = (self.index + delta) % len(self._images)
        self._show_current()

    def _show_current(self) -> None:
        if not self._images:
            self.image_label.setText("No gallery images could be loaded.")
            self.counter.setText("")
            return
        identifier, image = self._images[self.index]
        preview = image.copy()
        preview.thumbnail(MAX_IMAGE_SIZE)
        self.image_label.setPixmap(pil_to_qpixmap(preview))
        self.image_label.setToolTip(identifier)
        self.counter.setText(f"{self.index + 1} / {len(self._images)}")
