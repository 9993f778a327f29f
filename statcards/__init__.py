"""
statcards: configurable stat cards over dynamic-column record sets.

Columns are defined at runtime, records are plain mappings keyed by column
name, and cards aggregate one column (optionally behind a filter) for display
in a saved, per-collection order.
"""

from pathlib import Path

BASE_PATH = Path(__file__).resolve().parent
