"""Tests for the catalog view controller against a mocked HTTP backend."""

import asyncio

import httpx
import pytest
import pytest_asyncio

from storefront.client.controller import CatalogController


def filters_payload(**overrides):
    payload = {
        "categories": [
            {"id": 1, "name": "IP cameras", "count": 2},
            {"id": 2, "name": "Analog cameras", "count": 1},
        ],
        "bodyTypes": [{"id": "Dome", "name": "Dome", "count": 2}],
        "resolutions": [{"id": "4MP", "name": "4MP", "count": 1}],
        "priceRange": {"min": 3500.4, "max": 14500.2},
    }
    payload.update(overrides)
    return payload


def product(pid: int, name: str = "Camera", price: float = 7500):
    return {
        "id": pid,
        "name": f"{name} {pid}",
        "slug": f"camera-{pid}",
        "sku": f"SKU-{pid}",
        "description": "A camera for every occasion",
        "price": price,
        "category_id": 1,
        "is_hit": False,
        "in_stock": True,
        "stock_quantity": 5,
        "main_image": f"/images/{pid}.jpg",
        "created_at": "2026-01-01T00:00:00",
        "updated_at": "2026-01-01T00:00:00",
    }


def products_payload(products=None, total=None, page=1, limit=10, total_pages=None):
    products = products if products is not None else [product(1)]
    total = total if total is not None else len(products)
    return {
        "products": products,
        "pagination": {
            "total": total,
            "page": page,
            "limit": limit,
            "totalPages": total_pages or max(1, -(-total // limit)),
        },
    }


class FakeBackend:
    """Records requests and answers them from configurable handlers."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.filters = lambda request: httpx.Response(200, json=filters_payload())
        self.products = lambda request: httpx.Response(200, json=products_payload())

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/api/filters":
            return self.filters(request)
        if request.url.path == "/api/products":
            return self.products(request)
        return httpx.Response(404)

    def queries(self, path: str) -> list[str]:
        return [str(r.url.params) for r in self.requests if r.url.path == path]


@pytest.fixture
def backend():
    return FakeBackend()


@pytest_asyncio.fixture
async def http(backend):
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(backend), base_url="http://test"
    ) as client:
        yield client


@pytest.mark.asyncio
async def test_mount_issues_requests_for_url(backend, http):
    controller = CatalogController(http)
    await controller.mount("/catalog?category=2&sort=price-desc&page=2")

    assert backend.queries("/api/filters") == ["category=2"]
    assert backend.queries("/api/products") == ["category=2&sort=price-desc&page=2&limit=10"]


@pytest.mark.asyncio
async def test_remount_reproduces_identical_requests(backend, http):
    url = "/catalog?search=dome&bodyType=Dome&minPrice=100&maxPrice=900&page=2"
    await CatalogController(http).mount(url)
    first = [str(r.url) for r in backend.requests]
    backend.requests.clear()

    await CatalogController(http).mount(url)
    assert sorted(str(r.url) for r in backend.requests) == sorted(first)


@pytest.mark.asyncio
async def test_facets_are_marked_checked_from_url(http):
    controller = CatalogController(http)
    await controller.mount("/catalog?category=2&bodyType=Dome")

    assert [c.checked for c in controller.categories] == [False, True]
    assert controller.body_types[0].checked is True
    assert controller.resolutions[0].checked is False
    assert controller.active_filters == ["category-2", "bodyType-Dome"]
    assert controller.active_filter_labels() == [
        ("category-2", "Analog cameras"),
        ("bodyType-Dome", "Dome"),
    ]


@pytest.mark.asyncio
async def test_products_and_pagination_loaded(backend, http):
    backend.products = lambda request: httpx.Response(
        200, json=products_payload([product(i) for i in range(1, 11)], total=23, page=3)
    )
    controller = CatalogController(http)
    await controller.mount("/catalog?page=3")

    assert len(controller.products) == 10
    assert controller.total_products == 23
    assert controller.total_pages == 3
    assert controller.loading is False

    controls = controller.pagination()
    assert controls.pages == [1, 2, 3]
    assert controls.next_disabled is True
    assert controls.previous_disabled is False
    assert controls.visible


@pytest.mark.asyncio
async def test_first_page_disables_previous(backend, http):
    backend.products = lambda request: httpx.Response(200, json=products_payload(total=23))
    controller = CatalogController(http)
    await controller.mount("/catalog")

    controls = controller.pagination()
    assert controls.previous_disabled is True
    assert controls.next_disabled is False


@pytest.mark.asyncio
async def test_facet_failure_keeps_previous_facets(backend, http):
    controller = CatalogController(http)
    await controller.mount("/catalog")
    assert len(controller.categories) == 2

    backend.filters = lambda request: httpx.Response(500, json={"error": "Internal Server Error"})
    backend.products = lambda request: httpx.Response(
        200, json=products_payload([product(7), product(8)])
    )
    await controller.toggle_category(1, True)

    assert controller.filter_error == "Failed to load filters: 500"
    assert len(controller.categories) == 2
    assert [p.id for p in controller.products] == [7, 8]
    assert controller.products_error is None


@pytest.mark.asyncio
async def test_application_error_payload_is_reported(backend, http):
    backend.filters = lambda request: httpx.Response(
        200, json=filters_payload(error="Facets unavailable")
    )
    controller = CatalogController(http)
    await controller.mount("/catalog")

    assert controller.filter_error == "Facets unavailable"


@pytest.mark.asyncio
async def test_unparseable_products_clear_list(backend, http):
    controller = CatalogController(http)
    await controller.mount("/catalog")
    assert controller.products

    backend.products = lambda request: httpx.Response(200, text="<html>oops</html>")
    await controller.change_sort("price-asc")

    assert controller.products == []
    assert controller.products_error == "Failed to process products data"
    assert controller.filter_error is None


@pytest.mark.asyncio
async def test_transport_error_is_captured(backend, http):
    def boom(request):
        raise httpx.ConnectError("connection refused", request=request)

    backend.products = boom
    controller = CatalogController(http)
    await controller.mount("/catalog")

    assert controller.products_error == "Failed to load products"
    assert controller.loading is False


@pytest.mark.asyncio
async def test_stale_response_is_dropped():
    release_slow = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/filters":
            return httpx.Response(200, json=filters_payload())
        if request.url.params["page"] == "1":
            await release_slow.wait()
            return httpx.Response(200, json=products_payload([product(1, "Stale")]))
        return httpx.Response(200, json=products_payload([product(2, "Fresh")], page=2))

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test"
    ) as http:
        controller = CatalogController(http)
        controller.initialize("/catalog")
        slow = asyncio.create_task(controller.fetch_products())
        await asyncio.sleep(0)
        await controller.on_url_change("/catalog?page=2")
        release_slow.set()
        await slow

    assert [p.name for p in controller.products] == ["Fresh 2"]
    assert controller.loading is False


@pytest.mark.asyncio
async def test_fetch_before_initialize_is_refused(http):
    controller = CatalogController(http)
    with pytest.raises(RuntimeError):
        await controller.refresh()


@pytest.mark.asyncio
async def test_url_change_before_initialize_does_not_fetch(backend, http):
    controller = CatalogController(http)
    await controller.on_url_change("/catalog?category=1")
    assert backend.requests == []


@pytest.mark.asyncio
async def test_initialize_runs_once(http):
    controller = CatalogController(http)
    controller.initialize("/catalog?search=dome&minPrice=100&maxPrice=900")
    controller.initialize("/catalog?search=other")

    assert controller.search_value == "dome"
    assert (controller.min_price, controller.max_price) == (100, 900)


@pytest.mark.asyncio
async def test_server_price_range_seeds_inputs_without_url_bounds(http):
    controller = CatalogController(http)
    await controller.mount("/catalog")
    assert (controller.min_price, controller.max_price) == (3500, 14501)


@pytest.mark.asyncio
async def test_url_price_bounds_win_over_server_range(http):
    controller = CatalogController(http)
    await controller.mount("/catalog?minPrice=4000&maxPrice=9000")
    assert (controller.min_price, controller.max_price) == (4000, 9000)


@pytest.mark.asyncio
async def test_edited_prices_survive_refetch_and_apply(backend, http):
    controller = CatalogController(http)
    await controller.mount("/catalog?page=2")
    controller.set_min_price("5000")
    controller.set_max_price("not a number")
    await controller.submit_search("dome")

    assert (controller.min_price, controller.max_price) == (5000, 0)

    controller.set_max_price(8000)
    await controller.apply_price_range()
    assert controller.url == "/catalog?page=1&search=dome&minPrice=5000&maxPrice=8000"
    assert backend.queries("/api/products")[-1] == (
        "search=dome&minPrice=5000&maxPrice=8000&sort=name-asc&page=1&limit=10"
    )


@pytest.mark.asyncio
async def test_interactions_navigate_through_url():
    visited = []

    async def navigate(href):
        visited.append(href)

    async with httpx.AsyncClient(
        transport=httpx.MockTransport(FakeBackend()), base_url="http://test"
    ) as http:
        controller = CatalogController(http, navigate=navigate)
        await controller.mount("/catalog?sort=price-asc&category=2&page=3")
        await controller.toggle_body_type("Dome", True)
        await controller.clear_filter("category-2")
        await controller.clear_all_filters()
        await controller.change_page_size(20)

    assert visited == [
        "/catalog?sort=price-asc&category=2&page=1&bodyType=Dome",
        "/catalog?sort=price-asc&page=1",
        "/catalog?sort=price-asc&page=1",
        "/catalog?sort=price-asc&category=2&page=1&limit=20",
    ]
    # Navigation is delegated; state follows the URL only when it changes
    assert controller.query.page == 3


@pytest.mark.asyncio
async def test_page_navigation_respects_bounds(backend, http):
    backend.products = lambda request: httpx.Response(200, json=products_payload(total=23))
    controller = CatalogController(http)
    await controller.mount("/catalog?category=2")

    await controller.previous_page()
    assert controller.url == "/catalog?category=2"

    await controller.next_page()
    assert controller.url == "/catalog?category=2&page=2"
    assert backend.queries("/api/products")[-1] == "category=2&sort=name-asc&page=2&limit=10"


@pytest.mark.asyncio
async def test_add_to_cart(http):
    controller = CatalogController(http)
    await controller.mount("/catalog")
    controller.add_to_cart(controller.products[0])
    controller.add_to_cart(controller.products[0])

    assert controller.cart.total_quantity == 2


@pytest.mark.asyncio
async def test_negative_price_bounds_are_clamped(backend, http):
    controller = CatalogController(http)
    await controller.mount("/catalog")

    controller.set_min_price("-100")
    await controller.apply_price_range()

    assert controller.min_price == 0
    assert controller.url == "/catalog?minPrice=0&maxPrice=14501&page=1"
    assert controller.products_error is None
    assert backend.queries("/api/products")[-1].startswith("minPrice=0&maxPrice=14501")


@pytest.mark.asyncio
async def test_products_failure_resets_pagination(backend, http):
    backend.products = lambda request: httpx.Response(200, json=products_payload(total=23))
    controller = CatalogController(http)
    await controller.mount("/catalog")
    assert controller.total_pages == 3

    backend.products = lambda request: httpx.Response(500)
    await controller.change_sort("price-desc")

    controls = controller.pagination()
    assert controller.products == []
    assert controller.total_products == 0
    assert controls.pages == [1]
    assert controls.next_disabled is True


@pytest.mark.asyncio
async def test_previous_page_from_past_the_end_lands_on_last_page(backend, http):
    backend.products = lambda request: httpx.Response(
        200, json=products_payload([], total=23, page=5)
    )
    controller = CatalogController(http)
    await controller.mount("/catalog?page=5")
    assert controller.total_pages == 3

    await controller.previous_page()
    assert controller.url == "/catalog?page=3"

    await controller.next_page()
    assert controller.url == "/catalog?page=3"
