# apps/heroes/services/provider.py
# ==============================================================================
"""
Hero-data providers.

`HeroDataProvider` is the structural contract the battle engine depends on.
`SuperheroApiProvider` talks to superheroapi.com over httpx with an explicit
timeout and a bounded, jittered retry loop.
"""

from __future__ import annotations

import asyncio
import random
from typing import TYPE_CHECKING, Any, Protocol, Self
from urllib.parse import quote

import httpx
import orjson
import structlog

from apps.core.conf import USER_AGENTS
from apps.core.exceptions import HeroNotFoundError, ProviderUnavailableError
from apps.heroes.conf import HeroAttributes, SuperheroApiConfig

if TYPE_CHECKING:
    from types import TracebackType

log = structlog.get_logger(__name__).bind(component="HeroProvider")

# 4xx other than these means the request itself is wrong; retrying won't help.
RETRYABLE_STATUS: frozenset[int] = frozenset({408, 425, 429})


class HeroDataProvider(Protocol):
    """
    Defines the contract for hero-data sources.

    Implementations raise `HeroNotFoundError` for unknown ids and
    `ProviderUnavailableError` when the source cannot answer.
    """

    async def __aenter__(self) -> Self: ...

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None: ...

    async def fetch_hero(self, hero_id: str) -> HeroAttributes: ...

    async def search(self, name: str) -> list[HeroAttributes]: ...


def parse_hero(payload: dict[str, Any], *, hero_id: str | None = None) -> HeroAttributes:
    """Map one superheroapi.com hero object onto `HeroAttributes`."""
    image = payload.get("image")
    stats = payload.get("powerstats")
    raw_stats = {
        str(name): value if value is None or isinstance(value, str | int) else str(value)
        for name, value in (stats.items() if isinstance(stats, dict) else ())
    }
    return HeroAttributes(
        id=str(payload.get("id") or hero_id or ""),
        name=str(payload.get("name") or "Unknown"),
        image_url=image.get("url") if isinstance(image, dict) else None,
        raw_power_stats=raw_stats,
    )


class SuperheroApiProvider:
    """
    Client for https://superheroapi.com (`{base}/{api_key}/{id}`).

    The API answers 200 for unknown ids with `{"response": "error", ...}`;
    that is reported as `HeroNotFoundError`, not retried.
    """

    def __init__(
        self,
        config: SuperheroApiConfig | None = None,
        *,
        session: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config or SuperheroApiConfig.from_settings()
        self._external_session = session
        self._session: httpx.AsyncClient | None = session

    # ------------------------------------------------------- context manager --
    async def __aenter__(self) -> Self:
        if self._session is None:
            self._session = httpx.AsyncClient(
                timeout=self._config.timeout_s,
                follow_redirects=True,
                headers={"User-Agent": random.choice(USER_AGENTS)},
            )
        return self

    async def __aexit__(self, *exc) -> None:
        if not self._external_session and self._session:
            await self._session.aclose()
            self._session = None

    # ------------------------------------------------------- public API -------
    async def fetch_hero(self, hero_id: str) -> HeroAttributes:
        payload = await self._request(str(hero_id))
        if payload.get("response") != "success":
            raise HeroNotFoundError(str(hero_id), str(payload.get("error") or f"Hero {hero_id!r} not found."))
        return parse_hero(payload, hero_id=str(hero_id))

    async def search(self, name: str) -> list[HeroAttributes]:
        payload = await self._request(f"search/{quote(name, safe='')}")
        if payload.get("response") != "success":
            return []
        results = payload.get("results") or []
        return [parse_hero(item) for item in results if isinstance(item, dict)]

    # ------------------------------------------------------- internals --------
    def _url(self, path: str) -> str:
        return f"{self._config.base_url}/{self._config.api_key}/{path}"

    def _redact(self, err: Exception) -> str:
        text = str(err)
        return text.replace(self._config.api_key, "***") if self._config.api_key else text

    async def _request(self, path: str) -> dict[str, Any]:
        if self._session is None:
            msg = "Provider session not initialised; use 'async with'."
            raise RuntimeError(msg)

        retry = self._config.retry
        for attempt in range(retry.max_retries + 1):
            try:
                resp = await self._session.get(self._url(path))
                resp.raise_for_status()
                data = orjson.loads(resp.content)
                if not isinstance(data, dict):
                    msg = f"Unexpected payload type {type(data).__name__}"
                    raise TypeError(msg)
                return data
            except httpx.HTTPStatusError as exc:
                status = exc.response.status_code
                if status < 500 and status not in RETRYABLE_STATUS:
                    msg = f"Hero provider rejected request ({status})"
                    raise ProviderUnavailableError(msg) from exc
                err: Exception = exc
            except (httpx.TransportError, orjson.JSONDecodeError, TypeError) as exc:
                err = exc

            if attempt >= retry.max_retries:
                log.error("hero provider failed", path=path, attempts=attempt + 1, err=self._redact(err))
                msg = f"Hero provider unavailable after {attempt + 1} attempt(s): {self._redact(err)}"
                raise ProviderUnavailableError(msg) from err

            delay = retry.backoff(attempt)
            log.warning(
                "hero provider request failed, retrying",
                attempt=attempt + 1,
                delay=f"{delay:.2f}s",
                err=self._redact(err),
            )
            await asyncio.sleep(delay)

        msg = "Unreachable retry loop exit"
        raise RuntimeError(msg)


def get_provider() -> HeroDataProvider:
    """Provider used by the HTTP views and management commands."""
    return SuperheroApiProvider(SuperheroApiConfig.from_settings())
