# apps/battles/models/__init__.py
# ================================================================================
"""Re-exports for the battles app models."""

from __future__ import annotations

from .match import Match, MatchQuerySet

__all__ = ["Match", "MatchQuerySet"]
