"""
PySide6 desktop shell for the configurator.
"""
