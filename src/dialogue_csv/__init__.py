"""
Dialogue CSV Package

Delimited-text codec and CSV localization layer for dialogue assets.

ARCHITECTURAL GUARANTEE:
------------------------
This package contains ZERO knowledge of:
    - Node graph rendering or layout
    - Editor windows, menus or toolbars
    - How dialogue assets are persisted

The codec turns text into tables and back.
The localization layer maps tables onto dialogue containers.
Everything else belongs to the host editor.
"""

__version__ = "0.1.0"
