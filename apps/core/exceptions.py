"""
Error taxonomy shared by the arena apps.

Every error carries a stable ``kind`` string so the HTTP boundary (and any
other caller) can branch on the failure class without string-matching
messages.
"""

from __future__ import annotations

from typing import ClassVar


class ArenaError(RuntimeError):
    """Base class for every failure raised on purpose by the arena."""

    kind: ClassVar[str] = "arena_error"


# ─── Data quality ──────────────────────────────────────────────────────────────


class DataQualityError(ArenaError, ValueError):
    """A malformed upstream stat field. Absorbed by the normalizer, never surfaced."""

    kind = "data_quality"


# ─── Hero provider ─────────────────────────────────────────────────────────────


class ProviderError(ArenaError):
    """Base for failures talking to the hero-data provider."""

    kind = "provider_error"


class ProviderUnavailableError(ProviderError):
    """The provider could not be reached (or kept failing) within the retry budget."""

    kind = "provider_unavailable"


class HeroNotFoundError(ProviderError):
    """The provider answered, but has no hero for the requested id."""

    kind = "hero_not_found"

    def __init__(self, hero_id: str, detail: str | None = None) -> None:
        self.hero_id = hero_id
        super().__init__(detail or f"Hero {hero_id!r} not found.")


class OpponentAssemblyError(ProviderUnavailableError):
    """A random team could not be assembled within the attempt budget."""

    kind = "opponent_assembly_failed"


# ─── Invariants ────────────────────────────────────────────────────────────────


class InvariantViolation(ArenaError, ValueError):
    """A caller broke a precondition of an operation."""

    kind = "invariant_violation"


class EmptyTeamError(InvariantViolation):
    kind = "empty_team"


class InvalidBattleRequest(InvariantViolation):
    kind = "invalid_request"


# ─── Persistence ───────────────────────────────────────────────────────────────


class MatchPersistenceError(ArenaError):
    """Writing a match (and its stats update) failed; nothing was committed."""

    kind = "persistence_failure"


class ImmutableMatchError(ArenaError):
    """Recorded matches are write-once."""

    kind = "immutable_match"
