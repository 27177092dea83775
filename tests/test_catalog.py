"""Tests for EPREL page parsing, the lookup client, and its cache.

HTTP is served by httpx.MockTransport; nothing leaves the process.
"""

import asyncio

import httpx
import pytest

from tirestore.core.errors import CatalogLookupFailure
from tirestore.models.tire import TireAttributes
from tirestore.services.catalog import CatalogLookup, parse_product_page, parse_size
from tirestore.services.lookup_cache import CatalogCache

BASE_URL = "https://eprel.test/screen/product/tyres"

BRAND_CLASSES = "ecl-u-type-l ecl-u-type-color-grey-75 ecl-u-type-family-alt"
VALUE_CLASSES = "ecl-u-type-bold ecl-u-pl-l-xl ecl-u-pr-2xs ecl-u-type-align-right"


def product_page(brand: str | None, values: list[str]) -> str:
    brand_html = f'<div class="{BRAND_CLASSES}"> {brand} </div>' if brand else ""
    cells = "".join(f'<span class="{VALUE_CLASSES}"> {v} </span>' for v in values)
    return f"<html><body><header>{brand_html}</header><main>{cells}</main></body></html>"


MICHELIN_PAGE = product_page("MICHELIN", ["", "PRIMACY 4", "205/55 R16", "C1"])


def make_lookup(handler, timeout: float = 5.0, cache: CatalogCache | None = None):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return CatalogLookup(cache=cache, client=client, base_url=BASE_URL, timeout=timeout)


async def _resolve(lookup: CatalogLookup, *codes: str) -> list[TireAttributes]:
    try:
        return [await lookup.resolve(code) for code in codes]
    finally:
        await lookup.close()


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


class TestParseSize:
    def test_standard_size(self):
        assert parse_size("205/55 R16") == (20.5, 55, 16)

    def test_no_space_before_rim(self):
        assert parse_size("225/40R18 92Y") == (22.5, 40, 18)

    def test_not_a_size(self):
        assert parse_size("PRIMACY 4") is None

    @pytest.mark.parametrize("size", ["0/55 R16", "205/0 R16", "205/55 R0"])
    def test_zero_part_is_rejected(self, size):
        assert parse_size(size) is None


class TestParseProductPage:
    def test_extracts_brand_model_and_size(self):
        attrs = parse_product_page(MICHELIN_PAGE)
        assert attrs == TireAttributes(
            brand="MICHELIN", model="PRIMACY 4", width=20.5, aspect_ratio=55, diameter=16
        )

    def test_model_falls_back_to_placeholder(self):
        attrs = parse_product_page(product_page("Nokian", ["195/65 R15"]))
        assert attrs is not None
        assert attrs.model == "N/A"

    def test_size_may_come_first(self):
        attrs = parse_product_page(product_page("Pirelli", ["245/35 R19", "P ZERO"]))
        assert attrs.model == "P ZERO"
        assert attrs.width == 24.5

    def test_missing_brand(self):
        assert parse_product_page(product_page(None, ["PRIMACY 4", "205/55 R16"])) is None

    def test_missing_size(self):
        assert parse_product_page(product_page("MICHELIN", ["PRIMACY 4"])) is None

    def test_unrelated_page(self):
        assert parse_product_page("<html><body>Maintenance</body></html>") is None

    def test_zero_width_size(self):
        assert parse_product_page(product_page("Michelin", ["PRIMACY 4", "0/55 R16"])) is None


# ---------------------------------------------------------------------------
# Lookup client
# ---------------------------------------------------------------------------


class TestCatalogLookup:
    def test_resolves_and_caches(self):
        requests: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(str(request.url))
            return httpx.Response(200, text=MICHELIN_PAGE)

        lookup = make_lookup(handler)
        first, second = asyncio.run(_resolve(lookup, "123456", "123456"))

        assert first == second
        assert first.brand == "MICHELIN"
        assert requests == [f"{BASE_URL}/123456"]

    def test_not_found_page(self):
        lookup = make_lookup(lambda request: httpx.Response(404, text="gone"))
        with pytest.raises(CatalogLookupFailure) as exc_info:
            asyncio.run(_resolve(lookup, "999"))
        assert exc_info.value.status_code == 404
        assert exc_info.value.catalog_code == "999"

    def test_server_error_is_bad_gateway(self):
        lookup = make_lookup(lambda request: httpx.Response(503))
        with pytest.raises(CatalogLookupFailure) as exc_info:
            asyncio.run(_resolve(lookup, "123"))
        assert exc_info.value.status_code == 502

    def test_connection_error_is_bad_gateway(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(CatalogLookupFailure) as exc_info:
            asyncio.run(_resolve(make_lookup(handler), "123"))
        assert exc_info.value.status_code == 502

    def test_transport_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(CatalogLookupFailure) as exc_info:
            asyncio.run(_resolve(make_lookup(handler), "123"))
        assert exc_info.value.status_code == 504

    def test_overall_timeout(self):
        async def handler(request: httpx.Request) -> httpx.Response:
            await asyncio.sleep(1)
            return httpx.Response(200, text=MICHELIN_PAGE)

        lookup = make_lookup(handler, timeout=0.05)
        with pytest.raises(CatalogLookupFailure) as exc_info:
            asyncio.run(_resolve(lookup, "123"))
        assert exc_info.value.status_code == 504
        assert len(lookup.cache) == 0

    def test_unparseable_page_is_not_cached(self):
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text="<html></html>")

        cache = CatalogCache()
        lookup = make_lookup(handler, cache=cache)

        async def twice():
            for _ in range(2):
                with pytest.raises(CatalogLookupFailure):
                    await lookup.resolve("123")
            await lookup.close()

        asyncio.run(twice())
        assert len(calls) == 2
        assert len(cache) == 0

    def test_zero_size_page_is_not_found(self):
        page = product_page("Michelin", ["PRIMACY 4", "0/55 R16"])
        lookup = make_lookup(lambda request: httpx.Response(200, text=page))

        with pytest.raises(CatalogLookupFailure) as exc_info:
            asyncio.run(_resolve(lookup, "123"))
        assert exc_info.value.status_code == 404
        assert len(lookup.cache) == 0

    def test_code_is_url_quoted(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url.raw_path.decode())
            return httpx.Response(200, text=MICHELIN_PAGE)

        asyncio.run(_resolve(make_lookup(handler), "12/34"))
        assert seen == ["/screen/product/tyres/12%2F34"]


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------


class TestCatalogCache:
    def test_key_is_normalized(self):
        cache = CatalogCache()
        attrs = parse_product_page(MICHELIN_PAGE)
        cache.set(" abc1 ", attrs)
        assert cache.get("ABC1") == attrs

    def test_miss_returns_none(self):
        assert CatalogCache().get("nope") is None

    def test_bounded_size(self):
        cache = CatalogCache(maxsize=2)
        attrs = parse_product_page(MICHELIN_PAGE)
        for code in ["a", "b", "c"]:
            cache.set(code, attrs)
        assert len(cache) == 2

    def test_clear(self):
        cache = CatalogCache()
        cache.set("a", parse_product_page(MICHELIN_PAGE))
        cache.clear()
        assert cache.get("a") is None
