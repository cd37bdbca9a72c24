"""Catalog view controller.

Keeps the catalog's facets and product page in sync with the ``/catalog``
URL. User interactions never touch the filter state directly: they compute
the next URL and navigate, and the controller re-reads the URL and fetches
facets and products concurrently.

Each fetch kind carries its own generation counter. A response is applied
only if no newer request of the same kind was dispatched after it, so a slow
reply can never overwrite fresher results.
"""

import asyncio
import logging
import math
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from storefront.client import query as urls
from storefront.client.cart import Cart
from storefront.client.query import CATALOG_PATH, CatalogQuery
from storefront.core.config import settings
from storefront.schemas.filters import FilterOption, FiltersResponse, PriceRange, SortOrder
from storefront.schemas.product import ProductListResponse, ProductResponse

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

Navigate = Callable[[str], Awaitable[None]]


class CatalogFetchError(Exception):
    """Transport, HTTP, parse or application failure of one catalog fetch."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


@dataclass
class PageControls:
    current: int
    total_pages: int
    pages: list[int]
    previous_disabled: bool
    next_disabled: bool

    @property
    def visible(self) -> bool:
        return self.total_pages > 1


def _mark_checked(options: list[FilterOption], selected: str | None) -> list[FilterOption]:
    return [
        option.model_copy(update={"checked": str(option.id) == selected}) for option in options
    ]


def _to_price(value: int | str) -> int:
    try:
        return max(0, int(value))
    except (TypeError, ValueError):
        return 0


def create_client(base_url: str | None = None) -> httpx.AsyncClient:
    return httpx.AsyncClient(
        base_url=base_url or settings.API_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )


class CatalogController:
    """State of one mounted catalog view."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        navigate: Navigate | None = None,
        page_size: int | None = None,
        cart: Cart | None = None,
    ):
        self._client = client
        self._navigate = navigate
        self.page_size = page_size or settings.CATALOG_PAGE_SIZE
        self.cart = cart if cart is not None else Cart()

        # URL-derived state
        self.url = CATALOG_PATH
        self.params = httpx.QueryParams()
        self.query = CatalogQuery()
        self.initialized = False

        # Editable buffers, seeded once from the URL
        self.search_value = ""
        self.min_price = settings.DEFAULT_PRICE_MIN
        self.max_price = settings.DEFAULT_PRICE_MAX
        self._price_from_url = False
        self._price_edited = False

        # Fetched results
        self.categories: list[FilterOption] = []
        self.body_types: list[FilterOption] = []
        self.resolutions: list[FilterOption] = []
        self.price_range = PriceRange(
            min=settings.DEFAULT_PRICE_MIN, max=settings.DEFAULT_PRICE_MAX
        )
        self.products: list[ProductResponse] = []
        self.total_products = 0
        self.total_pages = 1
        self.loading = False
        self.filter_error: str | None = None
        self.products_error: str | None = None

        self._filters_generation = 0
        self._products_generation = 0

    # ── URL lifecycle ──
    def _set_url(self, url: str) -> None:
        self.url = url
        self.params = urls.params_from_url(url)
        self.query = CatalogQuery.from_params(self.params)

    def initialize(self, url: str) -> None:
        """Adopt the URL the view was mounted with. Runs once per mount."""
        if self.initialized:
            return
        self._set_url(url)
        self.search_value = self.query.search
        if self.query.has_price_bounds:
            self.min_price = self.query.min_price
            self.max_price = self.query.max_price
            self._price_from_url = True
        self.initialized = True

    async def mount(self, url: str) -> None:
        self.initialize(url)
        await self.refresh()

    async def on_url_change(self, url: str) -> None:
        """Re-read URL state and refetch; ignored until the view is initialized."""
        self._set_url(url)
        if self.initialized:
            await self.refresh()

    async def refresh(self) -> None:
        if not self.initialized:
            raise RuntimeError("CatalogController.initialize() must run before fetching")
        await asyncio.gather(self.fetch_filters(), self.fetch_products())

    # ── Fetching ──
    async def _fetch(self, path: str, params: httpx.QueryParams, model: type[M], what: str) -> M:
        try:
            response = await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            logger.warning("Error fetching %s: %s", what, exc)
            raise CatalogFetchError(f"Failed to load {what}") from exc

        if response.is_error:
            logger.warning("%s request failed: %s %s", what, response.status_code, response.text)
            raise CatalogFetchError(f"Failed to load {what}: {response.status_code}")

        try:
            data = model.model_validate(response.json())
        except (ValueError, ValidationError) as exc:
            logger.warning("Unexpected %s payload: %s", what, exc)
            raise CatalogFetchError(f"Failed to process {what} data") from exc

        error = getattr(data, "error", None)
        if error:
            logger.warning("%s request returned an error: %s", what, error)
            raise CatalogFetchError(error)
        return data

    async def fetch_filters(self) -> None:
        self._filters_generation += 1
        generation = self._filters_generation
        query = self.query

        try:
            data = await self._fetch(
                "/api/filters", query.filters_request(), FiltersResponse, "filters"
            )
        except CatalogFetchError as exc:
            if generation == self._filters_generation:
                self.filter_error = exc.message
            return

        if generation != self._filters_generation:
            logger.debug("Dropping stale filters response %d", generation)
            return

        self.filter_error = None
        self.categories = _mark_checked(data.categories, query.category)
        self.body_types = _mark_checked(data.body_types, query.body_type)
        self.resolutions = _mark_checked(data.resolutions, query.resolution)
        self.price_range = data.price_range
        # The server range seeds the price inputs only while the URL has no
        # bounds and the user has not typed any.
        if not self._price_from_url and not self._price_edited:
            self.min_price = math.floor(data.price_range.min)
            self.max_price = math.ceil(data.price_range.max)

    async def fetch_products(self) -> None:
        self._products_generation += 1
        generation = self._products_generation
        query = self.query

        self.loading = True
        self.products_error = None
        try:
            data = await self._fetch(
                "/api/products",
                query.products_request(self.page_size),
                ProductListResponse,
                "products",
            )
        except CatalogFetchError as exc:
            if generation == self._products_generation:
                self.products_error = exc.message
                self.products = []
                self.total_products = 0
                self.total_pages = 1
                self.loading = False
            return

        if generation != self._products_generation:
            logger.debug("Dropping stale products response %d", generation)
            return

        self.products = data.products
        self.total_products = data.pagination.total
        self.total_pages = data.pagination.total_pages
        self.loading = False

    # ── Interactions ──
    async def _go(self, href: str) -> None:
        if self._navigate is not None:
            await self._navigate(href)
        else:
            await self.on_url_change(href)

    async def toggle_category(self, category_id: int | str, checked: bool) -> None:
        await self._go(urls.set_filter(self.params, "category", str(category_id), checked))

    async def toggle_body_type(self, value: str, checked: bool) -> None:
        await self._go(urls.set_filter(self.params, "bodyType", value, checked))

    async def toggle_resolution(self, value: str, checked: bool) -> None:
        await self._go(urls.set_filter(self.params, "resolution", value, checked))

    async def clear_filter(self, active_filter: str) -> None:
        await self._go(urls.clear_filter(self.params, active_filter))

    async def clear_all_filters(self) -> None:
        await self._go(urls.clear_all_filters(self.params))

    def set_min_price(self, value: int | str) -> None:
        self.min_price = _to_price(value)
        self._price_edited = True

    def set_max_price(self, value: int | str) -> None:
        self.max_price = _to_price(value)
        self._price_edited = True

    async def apply_price_range(self) -> None:
        await self._go(urls.apply_price_range(self.params, self.min_price, self.max_price))

    async def change_sort(self, sort: SortOrder | str) -> None:
        await self._go(urls.set_sort(self.params, sort))

    async def submit_search(self, text: str | None = None) -> None:
        if text is not None:
            self.search_value = text
        await self._go(urls.set_search(self.params, self.search_value))

    async def go_to_page(self, page: int) -> None:
        if page < 1:
            return
        # A URL can point past the last page; step back onto the last one
        page = min(page, self.total_pages)
        if page == self.query.page:
            return
        await self._go(urls.set_page(self.params, page))

    async def previous_page(self) -> None:
        await self.go_to_page(self.query.page - 1)

    async def next_page(self) -> None:
        await self.go_to_page(self.query.page + 1)

    async def change_page_size(self, limit: int) -> None:
        await self._go(urls.set_page_size(self.params, limit))

    def add_to_cart(self, product: ProductResponse) -> None:
        self.cart.add_product(product)

    # ── Derived view data ──
    @property
    def current_page(self) -> int:
        return self.query.page

    @property
    def active_filters(self) -> list[str]:
        return self.query.active_filters

    def pagination(self) -> PageControls:
        current = self.query.page
        return PageControls(
            current=current,
            total_pages=self.total_pages,
            pages=list(range(1, self.total_pages + 1)),
            previous_disabled=current <= 1,
            next_disabled=current >= self.total_pages,
        )

    def active_filter_labels(self) -> list[tuple[str, str]]:
        """(entry, display name) for each active filter whose option is loaded."""
        options = {
            "category": self.categories,
            "bodyType": self.body_types,
            "resolution": self.resolutions,
        }
        labels = []
        for entry in self.active_filters:
            kind, _, value = entry.partition("-")
            match = next((o for o in options[kind] if str(o.id) == value), None)
            if match:
                labels.append((entry, match.name))
        return labels
