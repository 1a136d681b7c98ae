"""Unit tests for OptionPanel."""

import pytest
from PySide6.QtCore import Qt

from home_configurator.configurator.hotspots import HotspotMapper, HotspotTarget, TargetKind
from home_configurator.core.models.selection import SelectionState
from home_configurator.gui.widgets.option_panel import OPTION_ID_ROLE, OptionPanel


@pytest.fixture
def panels(catalog):
    mapper = HotspotMapper(catalog)
    return mapper.panel_for([HotspotTarget(200, TargetKind.SET), HotspotTarget(202, TargetKind.SET)])


@pytest.fixture
def option_panel(qtbot):
    widget = OptionPanel()
    qtbot.addWidget(widget)
    widget.show()
    return widget


class TestShowPanels:
    """Tests for list contents."""

    def test_headers_and_options_listed(self, option_panel, panels):
        option_panel.show_panels(panels, SelectionState(), title="Kitchen & Flooring")
        labels = [option_panel.list.item(i).text() for i in range(option_panel.list.count())]
        assert labels == [
            "Kitchen",
            "Standard Kitchen (K-STD)",
            "Chef Kitchen (K-CHF)",
            "Flooring",
            "Carpet",
            "Hardwood",
        ]
        assert option_panel.title.text() == "Kitchen & Flooring"

    def test_check_state_follows_selection(self, option_panel, panels):
        option_panel.show_panels(panels, SelectionState({200: [2001]}))
        chef = option_panel.list.item(2)
        assert chef.checkState() == Qt.CheckState.Checked

        option_panel.refresh(SelectionState())
        assert option_panel.list.item(2).checkState() == Qt.CheckState.Unchecked

    def test_headers_not_selectable(self, option_panel, panels):
        option_panel.show_panels(panels, SelectionState())
        header = option_panel.list.item(0)
        assert header.data(OPTION_ID_ROLE) is None
        assert not header.flags() & Qt.ItemFlag.ItemIsEnabled


class TestOptionToggled:
    """Tests for the optionToggled signal."""

    def test_click_on_option_emits_id(self, option_panel, panels, qtbot):
        option_panel.show_panels(panels, SelectionState())
        with qtbot.waitSignal(option_panel.optionToggled) as blocker:
            option_panel.list.itemClicked.emit(option_panel.list.item(5))
        assert blocker.args == [2021]

    def test_click_on_header_emits_nothing(self, option_panel, panels, qtbot):
        option_panel.show_panels(panels, SelectionState())
        with qtbot.assertNotEmitted(option_panel.optionToggled):
            option_panel.list.itemClicked.emit(option_panel.list.item(0))


class TestGallery:
    """Tests for the View Gallery button."""

    def test_gallery_option_has_count_tooltip(self, option_panel, panels):
        option_panel.show_panels(panels, SelectionState())
        assert option_panel.list.item(5).toolTip() == "2 gallery image(s)"
        assert option_panel.list.item(4).toolTip() == ""

    def test_button_enabled_only_for_option_with_gallery(self, option_panel, panels):
        option_panel.show_panels(panels, SelectionState())
        assert not option_panel.gallery_button.isEnabled()
        option_panel.list.setCurrentRow(5)
        assert option_panel.gallery_button.isEnabled()
        option_panel.list.setCurrentRow(4)
        assert not option_panel.gallery_button.isEnabled()

    def test_button_click_emits_current_option_id(self, option_panel, panels, qtbot):
        option_panel.show_panels(panels, SelectionState())
        option_panel.list.setCurrentRow(5)
        with qtbot.waitSignal(option_panel.galleryRequested) as blocker:
            option_panel.gallery_button.click()
        assert blocker.args == [2021]

    def test_refresh_keeps_current_option(self, option_panel, panels):
        option_panel.show_panels(panels, SelectionState())
        option_panel.list.setCurrentRow(5)
        option_panel.refresh(SelectionState({202: [2021]}))
        assert option_panel.list.currentItem().data(OPTION_ID_ROLE) == 2021
        assert option_panel.gallery_button.isEnabled()
