"""Configurator widgets."""

from .gallery_dialog import GalleryDialog
from .option_panel import OptionPanel
from .plan_canvas import PlanCanvas

__all__ = ["GalleryDialog", "OptionPanel", "PlanCanvas"]
