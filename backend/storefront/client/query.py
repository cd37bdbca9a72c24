"""Catalog URL state.

The query string of ``/catalog`` is the single source of truth for the
catalog's search, sort, filters, price bounds and page. `CatalogQuery` reads
it; the mutation helpers below derive the next URL from the current
parameters, changing only what the interaction touches.
"""

from dataclasses import dataclass
from urllib.parse import urlsplit

import httpx

from storefront.schemas.filters import SortOrder

CATALOG_PATH = "/catalog"

FILTER_PARAMS = ("category", "bodyType", "resolution")


def _int_param(params: httpx.QueryParams, key: str) -> int | None:
    value = params.get(key)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def _str_param(params: httpx.QueryParams, key: str) -> str | None:
    value = params.get(key)
    return value or None


def params_from_url(url: str) -> httpx.QueryParams:
    return httpx.QueryParams(urlsplit(url).query)


def catalog_href(params: httpx.QueryParams) -> str:
    query = str(params)
    return f"{CATALOG_PATH}?{query}" if query else CATALOG_PATH


@dataclass(frozen=True)
class CatalogQuery:
    search: str = ""
    sort: SortOrder = SortOrder.NAME_ASC
    category: str | None = None
    body_type: str | None = None
    resolution: str | None = None
    min_price: int | None = None
    max_price: int | None = None
    page: int = 1
    limit: int | None = None

    @classmethod
    def from_params(cls, params: httpx.QueryParams) -> "CatalogQuery":
        page = _int_param(params, "page")
        limit = _int_param(params, "limit")
        return cls(
            search=params.get("search") or "",
            sort=SortOrder.parse(params.get("sort")),
            category=_str_param(params, "category"),
            body_type=_str_param(params, "bodyType"),
            resolution=_str_param(params, "resolution"),
            min_price=_int_param(params, "minPrice"),
            max_price=_int_param(params, "maxPrice"),
            page=page if page and page > 0 else 1,
            limit=limit if limit and limit > 0 else None,
        )

    @classmethod
    def from_url(cls, url: str) -> "CatalogQuery":
        return cls.from_params(params_from_url(url))

    @property
    def has_price_bounds(self) -> bool:
        return self.min_price is not None and self.max_price is not None

    @property
    def active_filters(self) -> list[str]:
        """Selected facets as ``"<type>-<value>"`` entries, e.g. ``"category-2"``."""
        selected = (
            ("category", self.category),
            ("bodyType", self.body_type),
            ("resolution", self.resolution),
        )
        return [f"{kind}-{value}" for kind, value in selected if value]

    def filters_request(self) -> httpx.QueryParams:
        """Query for ``GET /api/filters``."""
        params: list[tuple[str, str]] = []
        if self.search:
            params.append(("search", self.search))
        if self.category:
            params.append(("category", self.category))
        if self.body_type:
            params.append(("bodyType", self.body_type))
        if self.resolution:
            params.append(("resolution", self.resolution))
        return httpx.QueryParams(params)

    def products_request(self, default_limit: int) -> httpx.QueryParams:
        """Query for ``GET /api/products``."""
        params = list(self.filters_request().multi_items())
        if self.min_price is not None:
            params.append(("minPrice", str(self.min_price)))
        if self.max_price is not None:
            params.append(("maxPrice", str(self.max_price)))
        params.append(("sort", self.sort.value))
        params.append(("page", str(self.page)))
        params.append(("limit", str(self.limit or default_limit)))
        return httpx.QueryParams(params)


# ── URL mutations ──
# Each helper returns the href to navigate to. Anything that changes the
# result set sends the user back to the first page.


def _first_page(params: httpx.QueryParams) -> str:
    return catalog_href(params.set("page", "1"))


def set_filter(params: httpx.QueryParams, kind: str, value: str, checked: bool) -> str:
    if kind not in FILTER_PARAMS:
        raise ValueError(f"Unknown filter type: {kind}")
    params = params.set(kind, value) if checked else params.remove(kind)
    return _first_page(params)


def clear_filter(params: httpx.QueryParams, active_filter: str) -> str:
    """Drop one ``"<type>-<value>"`` entry; values may themselves contain dashes."""
    kind, _, _ = active_filter.partition("-")
    return _first_page(params.remove(kind))


def clear_all_filters(params: httpx.QueryParams) -> str:
    """Keep search and sort, drop every facet and price bound."""
    kept = [(key, params[key]) for key in ("search", "sort") if params.get(key)]
    return _first_page(httpx.QueryParams(kept))


def apply_price_range(params: httpx.QueryParams, min_price: int, max_price: int) -> str:
    params = params.set("minPrice", str(min_price)).set("maxPrice", str(max_price))
    return _first_page(params)


def set_sort(params: httpx.QueryParams, sort: SortOrder | str) -> str:
    return _first_page(params.set("sort", SortOrder.parse(sort).value))


def set_search(params: httpx.QueryParams, text: str) -> str:
    text = text.strip()
    params = params.set("search", text) if text else params.remove("search")
    return _first_page(params)


def set_page(params: httpx.QueryParams, page: int) -> str:
    return catalog_href(params.set("page", str(page)))


def set_page_size(params: httpx.QueryParams, limit: int) -> str:
    return _first_page(params.set("limit", str(limit)))
