import httpx
import pytest

from apps.core.exceptions import HeroNotFoundError, ProviderUnavailableError
from apps.heroes.conf import RetryConfig, SuperheroApiConfig
from apps.heroes.services.provider import SuperheroApiProvider, get_provider

NO_DELAY = RetryConfig(max_retries=2, base_delay_s=0.0, max_delay_s=0.0, jitter_factor=0.0)

BATMAN = {
    "response": "success",
    "id": "70",
    "name": "Batman",
    "powerstats": {
        "intelligence": "100",
        "strength": "26",
        "speed": "27",
        "durability": "50",
        "power": "47",
        "combat": "100",
    },
    "image": {"url": "https://www.superherodb.com/pictures2/portraits/10/100/639.jpg"},
}


def make_provider(handler) -> tuple[SuperheroApiProvider, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def recording(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    config = SuperheroApiConfig(base_url="https://api.test", api_key="secret-key", timeout_s=1.0, retry=NO_DELAY)
    session = httpx.AsyncClient(transport=httpx.MockTransport(recording))
    return SuperheroApiProvider(config, session=session), seen


async def test_fetch_hero_success():
    provider, seen = make_provider(lambda request: httpx.Response(200, json=BATMAN))

    async with provider:
        hero = await provider.fetch_hero("70")

    assert hero.id == "70"
    assert hero.name == "Batman"
    assert hero.image_url.endswith("639.jpg")
    assert hero.raw_power_stats["strength"] == "26"
    assert str(seen[0].url) == "https://api.test/secret-key/70"


async def test_unknown_id_is_not_found_and_not_retried():
    provider, seen = make_provider(
        lambda request: httpx.Response(200, json={"response": "error", "error": "invalid id"}),
    )

    async with provider:
        with pytest.raises(HeroNotFoundError) as exc_info:
            await provider.fetch_hero("9999")

    assert exc_info.value.hero_id == "9999"
    assert len(seen) == 1


async def test_server_error_retried_then_success():
    responses = iter([httpx.Response(502), httpx.Response(200, json=BATMAN)])
    provider, seen = make_provider(lambda request: next(responses))

    async with provider:
        hero = await provider.fetch_hero("70")

    assert hero.name == "Batman"
    assert len(seen) == 2


async def test_persistent_failure_is_bounded():
    def broken(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider, seen = make_provider(broken)

    async with provider:
        with pytest.raises(ProviderUnavailableError) as exc_info:
            await provider.fetch_hero("70")

    assert len(seen) == NO_DELAY.max_retries + 1
    assert "secret-key" not in str(exc_info.value)


async def test_client_error_not_retried():
    provider, seen = make_provider(lambda request: httpx.Response(401))

    async with provider:
        with pytest.raises(ProviderUnavailableError):
            await provider.fetch_hero("70")

    assert len(seen) == 1


async def test_search_returns_all_results_and_empty_on_error():
    def handler(request):
        if request.url.path.endswith("/search/bat"):
            return httpx.Response(200, json={"response": "success", "results": [BATMAN, {**BATMAN, "id": "69"}]})
        return httpx.Response(200, json={"response": "error", "error": "character with given name not found"})

    provider, _ = make_provider(handler)

    async with provider:
        found = await provider.search("bat")
        missing = await provider.search("nobody")

    assert [hero.id for hero in found] == ["70", "69"]
    assert missing == []


async def test_request_outside_context_manager_fails():
    provider = SuperheroApiProvider(
        SuperheroApiConfig(base_url="https://api.test", api_key="k", timeout_s=1.0, retry=NO_DELAY),
    )
    with pytest.raises(RuntimeError):
        await provider.fetch_hero("1")


async def test_search_name_is_path_encoded():
    provider, seen = make_provider(lambda request: httpx.Response(200, json={"response": "error"}))

    async with provider:
        await provider.search("who?#me/you")

    assert seen[0].url.raw_path == b"/secret-key/search/who%3F%23me%2Fyou"
    assert seen[0].url.query == b""


def test_default_provider_is_the_configured_api_client(settings):
    settings.SUPERHERO_API_CONFIG = settings.SUPERHERO_API_CONFIG.model_copy(update={"BASE_URL": "https://heroes.test/"})

    provider = get_provider()

    assert isinstance(provider, SuperheroApiProvider)
    assert provider._url("1") == f"https://heroes.test/{settings.SUPERHERO_API_CONFIG.API_KEY}/1"
