"""Sprout editor app (TUI).

Interactive Textual TUI for preachers to draft a sermon section by
section, generate a draft from scripture, and present it in live mode.
"""

__version__ = "0.1.0"
