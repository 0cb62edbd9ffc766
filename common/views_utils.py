# common/views_utils.py
# ======================================================================
from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Self, TypeVar, cast

import orjson
import structlog
from asgiref.sync import async_to_sync
from django.core.cache import cache
from django.http import Http404, HttpRequest, HttpResponse
from django.views import View
from pydantic import BaseModel, ValidationError

from apps.core.exceptions import (
    ArenaError,
    HeroNotFoundError,
    InvalidBattleRequest,
    InvariantViolation,
    MatchPersistenceError,
    ProviderUnavailableError,
)

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

log = structlog.get_logger(__name__).bind(component="ViewsUtils")

# Most specific first: OpponentAssemblyError is a ProviderUnavailableError.
ERROR_STATUS: tuple[tuple[type[ArenaError], int], ...] = (
    (InvariantViolation, 400),
    (HeroNotFoundError, 404),
    (ProviderUnavailableError, 503),
    (MatchPersistenceError, 500),
)


# ------------------------------------------------------------------ orjson helpers
def _orjson_default(obj: Any) -> Any:
    """
    Custom serializer for types orjson doesn't handle.

    If the object implements `to_json()`, that is used; otherwise we raise
    TypeError so orjson can propagate an informative message.
    """
    if hasattr(obj, "to_json"):
        return obj.to_json()
    msg = f"{type(obj).__name__} is not JSON serialisable"
    raise TypeError(msg)


class OrjsonResponse(HttpResponse):
    """
    A high-performance JSON response using `orjson`.

    Data are encoded as UTF-8 bytes; `content_type` is set to
    `application/json` automatically. Non-finite floats encode as `null`.
    """

    def __init__(self, data: Any, *, status: int = 200, **kw: Any) -> None:
        opts = orjson.OPT_NAIVE_UTC
        content = orjson.dumps(data, default=_orjson_default, option=opts)
        kw.setdefault("content_type", "application/json")
        super().__init__(content=content, status=status, **kw)


def error_response(exc: ArenaError) -> OrjsonResponse:
    """Translate an arena error into its JSON response."""
    status = next((code for cls, code in ERROR_STATUS if isinstance(exc, cls)), 500)
    return OrjsonResponse({"detail": str(exc), "kind": exc.kind}, status=status)


# ------------------------------------------------------------------ pagination
@dataclass(slots=True, frozen=True)
class Page:
    """
    Simple value-object for pagination.

    Attributes
    ----------
    number : 1-based page index
    size   : page size in rows
    offset : SQL offset, computed automatically
    """

    number: int
    size: int
    offset: int = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "offset", (self.number - 1) * self.size)

    @classmethod
    def from_request(
        cls,
        req: HttpRequest,
        /,
        *,
        max_size: int = 100,
        default_size: int = 20,
    ) -> Self:
        """
        Parse `page` and `page_size` query params into a Page instance,
        applying sane defaults & bounds.
        """
        try:
            page_num = int(req.GET.get("page", 1))
        except (TypeError, ValueError):
            page_num = 1
        page_num = max(page_num, 1)

        try:
            raw_size = int(req.GET.get("page_size", default_size))
        except (TypeError, ValueError):
            raw_size = default_size
        page_size = max(1, min(raw_size, max_size))

        return cls(page_num, page_size)


# ------------------------------------------------------------------ BaseAsyncView
class BaseAsyncView(View):
    """
    Base-class for *async* Django CBVs with

        • Centralised error handling (arena error kinds → HTTP status)
        • orjson responses
        • Optional caching helper for read-only proxy endpoints
        • `nocache=true`  → bypass cache
        • `X-Cache-Status` header (HIT | MISS | BYPASS)
    """

    # ───────────────────────────── dispatch ──────────────────────────
    async def dispatch(self, request: HttpRequest, *args: Any, **kw: Any):  # type: ignore[override]
        self.request = request

        handler = getattr(self, request.method.lower(), None)
        if handler is None:
            return await self.http_method_not_allowed(request, *args, **kw)

        try:
            response = await handler(request, *args, **kw)
        except Http404 as exc:
            log.info("Resource not found", path=request.path, err=str(exc))
            response = OrjsonResponse({"detail": str(exc) or "Not found."}, status=404)
        except ArenaError as exc:
            log.warning("Request failed", path=request.path, kind=exc.kind, err=str(exc))
            response = error_response(exc)
        except Exception as exc:
            log.exception("Unhandled API error", path=request.path, exc_info=exc)
            response = OrjsonResponse({"detail": "An internal server error occurred."}, status=500)

        cache_status = getattr(request, "_cache_status", None)
        if cache_status:
            response["X-Cache-Status"] = cache_status
        return response

    async def http_method_not_allowed(self, request: HttpRequest, *a: Any, **k: Any) -> HttpResponse:
        log.warning("Method Not Allowed", method=request.method, path=request.path)
        return OrjsonResponse({"detail": f'Method "{request.method}" not allowed.'}, status=405)

    # ─────────────────────── request-parsing helpers ─────────────────
    @staticmethod
    def get_bool_param(request: HttpRequest, key: str, *, default: bool = False) -> bool:
        val = request.GET.get(key)
        if val is None:
            return default
        return val.lower() in {"1", "true", "yes", "on"}

    @staticmethod
    def get_int_param(
        request: HttpRequest,
        key: str,
        /,
        *,
        default: int,
        min_val: int | None = None,
        max_val: int | None = None,
    ) -> int:
        try:
            val = int(request.GET.get(key, default))
        except (TypeError, ValueError):
            val = default
        if min_val is not None:
            val = max(val, min_val)
        if max_val is not None:
            val = min(val, max_val)
        return val

    @staticmethod
    def parse_body(request: HttpRequest, model: type[M]) -> M:
        """Decode a JSON body and validate it against *model*."""
        try:
            raw = orjson.loads(request.body or b"{}")
        except orjson.JSONDecodeError as exc:
            msg = "Request body is not valid JSON."
            raise InvalidBattleRequest(msg) from exc
        try:
            return model.model_validate(raw)
        except ValidationError as exc:
            errors = "; ".join(f"{'.'.join(map(str, e['loc']))}: {e['msg']}" for e in exc.errors())
            raise InvalidBattleRequest(errors) from exc

    # ──────────────────── public caching convenience ─────────────────
    async def get_cached_data(
        self,
        request: HttpRequest,
        producer: Callable[[], T | Awaitable[T]],
        *,
        ttl: int,
        key: str,
    ) -> T:
        """
        • `nocache=true`  → run producer, skip read/write (BYPASS)
        • default         → HIT / MISS against the Django cache
        """

        async def produce_and_await() -> T:
            res = producer()
            if asyncio.iscoroutine(res):
                return await cast("Awaitable[T]", res)
            return cast("T", res)

        cache_key = f"{request.path}:{key}"
        if self.get_bool_param(request, "nocache"):
            request._cache_status = "BYPASS"
            return await produce_and_await()

        raw = await cache.aget(cache_key)
        if raw is not None:
            request._cache_status = "HIT"
            return cast("T", orjson.loads(raw))

        data = await produce_and_await()
        await cache.aset(cache_key, orjson.dumps(data, default=_orjson_default), timeout=ttl)
        request._cache_status = "MISS"
        return data


class BaseAppView(BaseAsyncView, ABC):
    """
    Universal base class for read-only application API views.

    1. A subclass-defined `_get_params` gathers the parameters from the path
       (kwargs) and query string (GET).
    2. A subclass-defined `_produce_payload` turns them into the response data.
    3. When `CACHE_TTL` is set the payload is cached under those parameters.
    """

    CACHE_TTL: int | None = None

    @abstractmethod
    def _get_params(self, request: HttpRequest, **kwargs) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    async def _produce_payload(self, params: dict[str, Any]) -> Any:
        raise NotImplementedError

    async def get(self, request: HttpRequest, **kwargs) -> OrjsonResponse:
        params = self._get_params(request, **kwargs)

        async def _producer() -> Any:
            return await self._produce_payload(params)

        if self.CACHE_TTL is None:
            return OrjsonResponse(await _producer())

        key = ":".join(f"{k}={params[k]}" for k in sorted(params))
        data = await self.get_cached_data(request, _producer, ttl=self.CACHE_TTL, key=key)
        return OrjsonResponse(data)


# ------------------------------------------------------------------ error handlers
async def _async_json_404_handler(request, exception):
    return OrjsonResponse({"detail": "The requested endpoint was not found."}, status=404)


async def _async_json_500_handler(request):
    return OrjsonResponse({"detail": "An internal server error occurred."}, status=500)


def json_404_handler(request, exception):
    """Synchronous wrapper for the async 404 handler."""
    return async_to_sync(_async_json_404_handler)(request, exception)


def json_500_handler(request):
    """Synchronous wrapper for the async 500 handler."""
    return async_to_sync(_async_json_500_handler)(request)
