import os
import pytest
import sys
from pathlib import Path
from PIL import Image

# Run Qt headless so GUI tests work without a display
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

# Add src to sys.path so we can import home_configurator
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from home_configurator.core.utils.serialization import deserialize_catalog  # noqa: E402


# ─────────────────────────────────────────────────────────────────────────────
# Catalog
# ─────────────────────────────────────────────────────────────────────────────
#
# Model 1 "Aspen"
#   Floor 10 "Front Elevation" (elevation, no base image)
#     Set 100 "Exterior Style": 1000 Craftsman, 1001 Modern
#     Set 101 "Exterior Colour": 1010 Stone Accent
#   Floor 20 "Main Floor" (plans/main.png, 1000x500)
#     Set 200 "Kitchen" (single, hotspot 25,40): 2000 Standard, 2001 Chef (conflicts Carpet)
#     Set 201 "Appliances" (multi, option-level): 2010 Gas Range (needs Chef), 2011 Wine Fridge
#     Set 202 "Flooring" (single, hotspot 25,40): 2020 Carpet, 2021 Hardwood (2 gallery images)
#     Set 203 "Extras" (multi): 2030 Island (needs Chef)
#   Floor 30 "Upper Floor" (no base image)
#     Set 300 "Bath": 3000 Soaker Tub

def make_catalog_data():
    return {
        "schema_version": 1,
        "models": [{"id": 1, "name": "Aspen", "cover_image": "null"}],
        "floors": [
            {"id": 10, "name": "Front Elevation", "model_id": 1, "base_plan_image": None},
            {"id": 20, "name": "Main Floor", "model_id": 1, "base_plan_image": "plans/main.png"},
            {"id": 30, "name": "Upper Floor", "model_id": 1, "base_plan_image": "null", "kind": "plan"},
        ],
        "option_sets": [
            {"id": 100, "name": "Exterior Style", "floor_id": 10, "position": 0},
            {"id": 101, "name": "Exterior Colour", "floor_id": 10, "position": 1},
            {"id": 200, "name": "Kitchen", "floor_id": 20, "position": 0,
             "hotspot": {"x": 25, "y": 40}, "icon_mode": "set_level"},
            {"id": 201, "name": "Appliances", "floor_id": 20, "position": 1,
             "allow_multiple": True, "icon_mode": "option_level"},
            {"id": 202, "name": "Flooring", "floor_id": 20, "position": 2,
             "hotspot": {"x": 25.00001, "y": 40}},
            {"id": 203, "name": "Extras", "floor_id": 20, "position": 3, "allow_multiple": True},
            {"id": 300, "name": "Bath", "floor_id": 30, "position": 0},
        ],
        "options": [
            {"id": 1000, "name": "Craftsman", "option_set_id": 100, "position": 0,
             "overlay_image": "elev/craftsman.png"},
            {"id": 1001, "name": "Modern", "option_set_id": 100, "position": 1,
             "overlay_image": "elev/modern.png"},
            {"id": 1010, "name": "Stone Accent", "option_set_id": 101, "position": 0,
             "overlay_image": "elev/stone.png"},
            {"id": 2000, "name": "Standard Kitchen", "option_set_id": 200, "position": 0, "code": "K-STD",
             "overlay_image": "ovl/kitchen_std.png",
             "placement": {"x": 10, "y": 20, "width": 30, "height": 40}, "layer_order": 1},
            {"id": 2001, "name": "Chef Kitchen", "option_set_id": 200, "position": 1, "code": "K-CHF",
             "overlay_image": "ovl/kitchen_chef.png",
             "placement": {"x": 10, "y": 20, "width": 30, "height": 40}, "layer_order": 1,
             "conflicts": [2020]},
            {"id": 2010, "name": "Gas Range", "option_set_id": 201, "position": 0,
             "overlay_image": "ovl/gas.png", "layer_order": 3,
             "placement": {"x": 55, "y": 45, "width": 10, "height": 10},
             "requirements": [2001], "hotspot": {"x": 60, "y": 50}},
            {"id": 2011, "name": "Wine Fridge", "option_set_id": 201, "position": 1,
             "overlay_image": "ovl/fridge.png", "layer_order": 2,
             "placement": {"x": 65, "y": 45, "width": 10, "height": 10},
             "hotspot": {"x": 70, "y": 50}},
            {"id": 2020, "name": "Carpet", "option_set_id": 202, "position": 0, "overlay_image": "null"},
            {"id": 2021, "name": "Hardwood", "option_set_id": 202, "position": 1,
             "overlay_image": "ovl/hardwood.png", "layer_order": 0,
             "gallery_images": ["gallery/oak.png", "gallery/walnut.png"]},
            {"id": 2030, "name": "Island", "option_set_id": 203, "position": 0, "requirements": [2001]},
            {"id": 3000, "name": "Soaker Tub", "option_set_id": 300, "position": 0,
             "overlay_image": "ovl/tub.png"},
        ],
    }


@pytest.fixture
def catalog_data():
    """Catalog document as loaded from JSON."""
    return make_catalog_data()


@pytest.fixture
def catalog(catalog_data):
    """Catalog snapshot built from catalog_data."""
    return deserialize_catalog(catalog_data)


# ─────────────────────────────────────────────────────────────────────────────
# Images
# ─────────────────────────────────────────────────────────────────────────────

ASSET_SIZES = {
    "plans/main.png": ((1000, 500), "white"),
    "elev/craftsman.png": ((400, 300), "tan"),
    "elev/modern.png": ((400, 300), "gray"),
    "elev/stone.png": ((400, 300), "brown"),
    "ovl/kitchen_std.png": ((100, 100), "blue"),
    "ovl/kitchen_chef.png": ((100, 100), "navy"),
    "ovl/gas.png": ((50, 50), "red"),
    "ovl/fridge.png": ((50, 50), "purple"),
    "ovl/hardwood.png": ((200, 100), "saddlebrown"),
    "ovl/tub.png": ((80, 40), "cyan"),
    "gallery/oak.png": ((120, 80), "peru"),
    "gallery/walnut.png": ((60, 90), "sienna"),
}


@pytest.fixture
def asset_dir(tmp_path: Path):
    """Directory holding every image the test catalog references."""
    root = tmp_path / "assets"
    for name, (size, color) in ASSET_SIZES.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        Image.new("RGBA", size, color=color).save(path)
    return root


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a simple test image."""
    img = Image.new("RGB", (200, 100), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path
