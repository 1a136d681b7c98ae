#!/usr/bin/env python3
"""
Run the Home Configurator from a source checkout without installing it.

    python run_configurator.py catalog.json --model 3 --assets ./images
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

from home_configurator.gui.app import run  # noqa: E402

if __name__ == "__main__":
    run(sys.argv[1:])
