"""
Fieldline CLI - Command-line interface for the field geometry engine.

Usage:
    fieldline list
    fieldline validate templates/futsal.yaml
    fieldline build soccer_11v11 --width 68 --length 105
    fieldline project config/fields/main_pitch.yaml
    fieldline render config/fields/main_pitch.yaml -o preview.png
"""

__version__ = "1.0.0"
