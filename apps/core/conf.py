"""Core configuration, constants, and Pydantic base models for the entire project."""

from __future__ import annotations

from typing import Final

from pydantic import BaseModel, ConfigDict

# ─── Constants ──────────────────────────────────────────────────────────────────

# Placeholder shown on the dashboard before a player has recorded any battle.
NO_MATCHES_PLACEHOLDER: Final[str] = "No matches yet"

# User agents for rotation
USER_AGENTS: Final[tuple[str, ...]] = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.0 Safari/605.1.15",
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
)

# ─── Base Pydantic Models ───────────────────────────────────────────────────────


class CamelModel(BaseModel):
    """Base model for payloads exchanged with the frontend (camelCase on the wire)."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

