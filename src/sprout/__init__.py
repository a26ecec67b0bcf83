"""Sprout - a structured sermon editor.

This package provides tools for:
- Writing sermons in the seven-part "Communicating for a Change" framework
- Persisting the draft locally and exchanging it as JSON files
- Generating a full draft from scripture with an LLM
- Walking through the sermon in live mode with a stopwatch
"""

__version__ = "0.1.0"
