from storefront.client.cart import Cart, CartItem
from storefront.client.checkout import submit_order
from storefront.client.controller import CatalogController, CatalogFetchError, create_client
from storefront.client.query import CatalogQuery

__all__ = [
    "Cart", "CartItem", "submit_order",
    "CatalogController", "CatalogFetchError", "create_client", "CatalogQuery",
]
