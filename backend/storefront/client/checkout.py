"""Submitting the cart as an order."""

import logging

import httpx
from pydantic import ValidationError

from storefront.client.cart import Cart
from storefront.schemas.common import ActionResult
from storefront.schemas.order import CheckoutRequest, OrderResponse

logger = logging.getLogger(__name__)


def _validation_message(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field = ".".join(str(part) for part in first["loc"])
    return f"{field}: {first['msg']}" if field else first["msg"]


def _response_message(response: httpx.Response) -> str:
    try:
        detail = response.json().get("detail")
    except ValueError:
        detail = None
    if isinstance(detail, str):
        return detail
    return f"Failed to create order: {response.status_code}"


async def submit_order(
    client: httpx.AsyncClient,
    cart: Cart,
    *,
    customer_name: str,
    email: str,
    phone: str,
    address: str | None = None,
    comment: str | None = None,
) -> ActionResult[OrderResponse]:
    """Post the cart to ``/api/orders``; the cart is emptied only on success."""
    if not cart.items:
        return ActionResult[OrderResponse](success=False, error="Cart is empty")

    try:
        payload = CheckoutRequest(
            customer_name=customer_name,
            email=email,
            phone=phone,
            address=address,
            comment=comment,
            items=cart.to_checkout_items(),
        )
    except ValidationError as exc:
        return ActionResult[OrderResponse](success=False, error=_validation_message(exc))

    try:
        response = await client.post("/api/orders", json=payload.model_dump(mode="json"))
    except httpx.HTTPError as exc:
        logger.warning("Error submitting order: %s", exc)
        return ActionResult[OrderResponse](success=False, error="Failed to create order")

    if response.is_error:
        logger.warning("Order rejected: %s %s", response.status_code, response.text)
        return ActionResult[OrderResponse](success=False, error=_response_message(response))

    try:
        order = OrderResponse.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        logger.warning("Unexpected order payload: %s", exc)
        return ActionResult[OrderResponse](success=False, error="Failed to process order data")

    cart.clear()
    logger.info("Order %s submitted", order.id)
    return ActionResult[OrderResponse](success=True, data=order)
