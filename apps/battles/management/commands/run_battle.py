# apps/battles/management/commands/run_battle.py
# ================================================================================
"""
Django management command to run a single battle from the command line.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any

import orjson
import structlog
from django.conf import settings
from django.core.management.base import BaseCommand, CommandError, CommandParser

from apps.battles.conf import DEFAULT_AI_TEAM_SIZE
from apps.battles.services.battle_service import BattleService
from apps.battles.services.match_recorder import MatchRecorder
from apps.core.exceptions import ArenaError
from apps.heroes.services.provider import get_provider
from apps.heroes.services.roster import HeroRoster

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from apps.heroes.conf import HeroData

log = structlog.get_logger(__name__)


class Command(BaseCommand):
    """Fetches two teams, resolves the battle between them, and optionally records it."""

    help = "Runs one battle between a given team and a given (or random) opponent team."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("--team", nargs="+", required=True, metavar="HERO_ID", help="Hero ids of the player's team.")
        parser.add_argument(
            "--opponent",
            nargs="+",
            metavar="HERO_ID",
            help="Hero ids of the opposing team. Drawn at random when omitted.",
        )
        parser.add_argument(
            "--opponent-size",
            type=int,
            default=getattr(settings, "AI_TEAM_SIZE", DEFAULT_AI_TEAM_SIZE),
            help="Size of the random opposing team.",
        )
        parser.add_argument("--player-id", type=int, help="Record the match (and stats) for this player.")
        parser.add_argument("--seed", type=int, help="Seed for random opponents and stat fallbacks.")
        parser.add_argument("--json", action="store_true", help="Output the result as raw JSON.")

    def handle(self, *args: Any, **options: Any) -> None:
        """Sync entry point that orchestrates the async execution."""
        try:
            asyncio.run(self._handle_async(**options))
        except KeyboardInterrupt:
            self.stderr.write(self.style.WARNING("\nOperation cancelled by user."))
        except CommandError:
            raise
        except ArenaError as e:
            msg = f"Battle failed ({e.kind}): {e}"
            raise CommandError(msg) from e
        except Exception as e:
            log.exception("run_battle command failed unexpectedly.", exc_info=e)
            msg = f"Command failed with an unhandled exception: {e}"
            raise CommandError(msg) from e

    async def _handle_async(self, **options: Any) -> None:
        if options["opponent_size"] < 1:
            msg = "--opponent-size must be at least 1."
            raise CommandError(msg)

        rng = random.Random(options["seed"]) if options["seed"] is not None else None
        async with get_provider() as provider:
            roster = HeroRoster(provider, rng=rng)
            player_team = await roster.fetch_team(options["team"])
            if options["opponent"]:
                ai_team = await roster.fetch_team(options["opponent"])
            else:
                ai_team = await roster.random_team(options["opponent_size"])

        payload = BattleService.simulate_battle(player_team, ai_team)

        if options["player_id"] is not None:
            await MatchRecorder().acreate_match(
                options["player_id"],
                player_team,
                ai_team,
                payload["result"]["victory"],
                match_id=payload["matchId"],
            )

        if options["json"]:
            result = {
                **payload,
                "playerTeam": [h.to_json() for h in player_team],
                "aiTeam": [h.to_json() for h in ai_team],
                "recorded": options["player_id"] is not None,
            }
            self.stdout.write(orjson.dumps(result, option=orjson.OPT_INDENT_2).decode())
        else:
            self._pretty_print(payload, player_team, ai_team, recorded=options["player_id"] is not None)

    def _pretty_print(
        self,
        payload: Mapping[str, Any],
        player_team: Sequence[HeroData],
        ai_team: Sequence[HeroData],
        *,
        recorded: bool,
    ) -> None:
        style = self.style
        result = payload["result"]
        stats = payload["teamStats"]
        self.stdout.write(style.MIGRATE_HEADING("\n" + "=" * 26 + "\n  BATTLE SUMMARY\n" + "=" * 26))
        self.stdout.write(f"  Match    : {payload['matchId']}")
        self.stdout.write(f"  Player   : {', '.join(h.name for h in player_team)}")
        self.stdout.write(f"  Opponent : {', '.join(h.name for h in ai_team)}")
        self.stdout.write(
            f"  DPS      : {stats['player']['offensiveScore']:.2f} vs {stats['ai']['offensiveScore']:.2f}",
        )
        self.stdout.write(f"  Defense  : {stats['player']['defensiveScore']} vs {stats['ai']['defensiveScore']}")
        self.stdout.write(f"  Survival : {result['team1SurvivalTime']:.2f}s vs {result['team2SurvivalTime']:.2f}s")
        outcome = style.SUCCESS("Victory") if result["victory"] else style.ERROR("Defeat")
        self.stdout.write(f"  Outcome  : {outcome}")
        self.stdout.write(f"  Recorded : {'yes' if recorded else 'no'}")
        self.stdout.write(style.MIGRATE_HEADING("=" * 26))
