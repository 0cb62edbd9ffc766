# /apps/players/conf.py
# ================================================================================
"""Configuration and constants for the 'players' app."""

from __future__ import annotations

from typing import Final

# ─── Match history pagination ──────────────────────────────────────────────────
MATCH_HISTORY_DEFAULT_PAGE_SIZE: Final[int] = 20
MATCH_HISTORY_MAX_PAGE_SIZE: Final[int] = 100
