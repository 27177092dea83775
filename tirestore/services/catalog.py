"""EPREL tyre catalog lookup.

Resolves a catalog (EPREL registration) code to brand, model and size by
reading the public product page at
``https://eprel.ec.europa.eu/screen/product/tyres/{code}``.

The page exposes the brand in a grey heading and every product value in
right-aligned bold cells. The size cell reads like ``205/55 R16``; the
first bold cell that is not a size is the commercial model name.
"""

import asyncio
import re
import time
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from tirestore.config import get_settings
from tirestore.core.enums import UNKNOWN_MODEL
from tirestore.core.errors import CatalogLookupFailure
from tirestore.core.logging import (
    log_catalog_fetch,
    log_catalog_hit,
    log_catalog_unparseable,
)
from tirestore.models.tire import TireAttributes
from tirestore.services.lookup_cache import CatalogCache

BRAND_SELECTOR = ".ecl-u-type-l.ecl-u-type-color-grey-75.ecl-u-type-family-alt"
VALUE_SELECTOR = ".ecl-u-type-bold.ecl-u-pl-l-xl.ecl-u-pr-2xs.ecl-u-type-align-right"

SIZE_PATTERN = re.compile(r"(\d+)/(\d+)\s*R\s*(\d+)")

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/108.0.0.0 Safari/537.36"
)


def parse_size(size: str) -> tuple[float, int, int] | None:
    """Parse '205/55 R16' into (width_cm, aspect_ratio, rim_diameter).

    Width on the sidewall is in millimetres; racks are measured in
    centimetres, so it is divided by 10. A zero in any part means the
    cell is not a usable size.
    """
    match = SIZE_PATTERN.search(size)
    if not match:
        return None
    width_mm, aspect, diameter = (int(g) for g in match.groups())
    if not (width_mm and aspect and diameter):
        return None
    return width_mm / 10, aspect, diameter


def parse_product_page(html: str) -> TireAttributes | None:
    """Extract tire attributes from an EPREL product page.

    Returns None when brand or size cannot be found, which usually means
    the page layout changed or the code does not exist.
    """
    soup = BeautifulSoup(html, "lxml")

    brand_el = soup.select_one(BRAND_SELECTOR)
    brand = brand_el.get_text(strip=True) if brand_el else ""

    values = [el.get_text(strip=True) for el in soup.select(VALUE_SELECTOR)]
    size_text = next((v for v in values if SIZE_PATTERN.search(v)), None)
    model = next((v for v in values if v and not SIZE_PATTERN.search(v)), None)

    if not brand or not size_text:
        return None

    size = parse_size(size_text)
    if size is None:
        return None
    width, aspect_ratio, diameter = size

    return TireAttributes(
        brand=brand,
        model=model or UNKNOWN_MODEL,
        width=width,
        aspect_ratio=aspect_ratio,
        diameter=diameter,
    )


class CatalogLookup:
    """Async client for EPREL product pages with a TTL cache in front."""

    def __init__(
        self,
        cache: CatalogCache | None = None,
        client: httpx.AsyncClient | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
    ) -> None:
        settings = get_settings()
        self.base_url = (base_url or settings.eprel_base_url).rstrip("/")
        self.timeout = timeout or settings.catalog_timeout_seconds
        self.cache = cache or CatalogCache(
            maxsize=settings.catalog_cache_size, ttl=settings.catalog_cache_ttl
        )
        self.client = client or httpx.AsyncClient(
            headers={"User-Agent": USER_AGENT},
            follow_redirects=True,
            timeout=self.timeout,
        )

    async def resolve(self, catalog_code: str) -> TireAttributes:
        """Resolve a catalog code to tire attributes.

        Raises:
            CatalogLookupFailure: source unreachable, timed out, or the
                page did not contain a brand and a size.
        """
        cached = self.cache.get(catalog_code)
        if cached is not None:
            log_catalog_hit(catalog_code)
            return cached

        try:
            html = await asyncio.wait_for(self._fetch(catalog_code), self.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException) as e:
            raise CatalogLookupFailure(
                f"Catalog lookup for {catalog_code} timed out.",
                catalog_code,
                status_code=504,
            ) from e

        attrs = parse_product_page(html)
        if attrs is None:
            log_catalog_unparseable(catalog_code)
            raise CatalogLookupFailure(
                f"No tire information found for EPREL {catalog_code}.", catalog_code
            )

        self.cache.set(catalog_code, attrs)
        return attrs

    async def _fetch(self, catalog_code: str) -> str:
        url = f"{self.base_url}/{quote(catalog_code.strip(), safe='')}"
        start = time.time()
        try:
            resp = await self.client.get(url)
        except httpx.TimeoutException:
            log_catalog_fetch(catalog_code, None, (time.time() - start) * 1000)
            raise
        except httpx.HTTPError as e:
            log_catalog_fetch(catalog_code, None, (time.time() - start) * 1000)
            raise CatalogLookupFailure(
                f"Catalog source unreachable for {catalog_code}.",
                catalog_code,
                status_code=502,
            ) from e

        log_catalog_fetch(catalog_code, resp.status_code, (time.time() - start) * 1000)

        if resp.status_code == 404:
            raise CatalogLookupFailure(
                f"No tire information found for EPREL {catalog_code}.", catalog_code
            )
        if resp.status_code != 200:
            raise CatalogLookupFailure(
                f"Catalog source answered {resp.status_code} for {catalog_code}.",
                catalog_code,
                status_code=502,
            )
        return resp.text

    async def close(self) -> None:
        await self.client.aclose()
