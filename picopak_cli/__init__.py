"""
Module 08 - PicoPak CLI

Command-line interface for the picopak package manager.

Usage:
    picopak install FastLED
    picopak install ./dist/my-lib-1.0.0.picopak --list
    picopak pack ./my-lib
    picopak submit ./dist/my-lib-1.0.0.picopak --index-file ./index.json
    picopak search led
"""

__version__ = "0.1.0"
