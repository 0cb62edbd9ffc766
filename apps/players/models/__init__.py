# apps/players/models/__init__.py
# ================================================================================
"""Re-exports for the players app models."""

from __future__ import annotations

from .player_stats import PlayerStats

__all__ = ["PlayerStats"]
