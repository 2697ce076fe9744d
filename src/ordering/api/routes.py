"""FastAPI routes for the Ordering domain: carts and orders.

Routes translate requests into commands, let the domain process them
synchronously, and render the resulting aggregate through a ``Projector`` in
the caller's language. Every response uses the ``{"status", "data"}`` envelope.
"""

import json

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain

from ordering.access import Caller
from ordering.api.dependencies import admin_caller, current_caller, projector
from ordering.api.schemas import (
    AddToCartRequest,
    AdminUpdateCartRequest,
    ApplyDiscountRequest,
    CheckoutRequest,
    CreateOrderRequest,
    NotesRequest,
    OrderStatusRequest,
    PaymentStatusRequest,
    UpdateCartQuantityRequest,
    UpdateOrderRequest,
    text_payload,
)
from ordering.cart.admin import AdminDeleteCart, AdminUpdateCart
from ordering.cart.items import AddItemsToCart, RemoveCartItem, UpdateCartItemNotes, UpdateCartItemQuantity
from ordering.cart.management import ApplyCartDiscount, ClearCart, OpenCart, UpdateCartNotes
from ordering.cart.queries import list_all_carts
from ordering.checkout.checkout import CheckoutCart
from ordering.order.cancellation import CancelOrder
from ordering.order.creation import PlaceOrder
from ordering.order.modification import DeactivateOrder, UpdateOrder, UpdateOrderNotes
from ordering.order.payment import MarkOrderPaid, UpdatePaymentStatus
from ordering.order.queries import get_order, list_all_orders, list_my_orders, list_orders_by_owner
from ordering.order.status import TransitionOrderStatus
from ordering.presenters import Projector


def _caller_fields(caller: Caller) -> dict:
    return {"caller_id": caller.user_id, "caller_role": caller.role}


def _dumps(value) -> str | None:
    return json.dumps(value, ensure_ascii=False) if value is not None else None


def _process(command):
    return current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


def _cart_envelope(view: Projector, cart) -> dict:
    return {"status": "success", "data": {"cart": view.cart(cart)}}


@cart_router.get("")
async def get_cart(caller: Caller = Depends(current_caller), view: Projector = Depends(projector)) -> dict:
    cart = _process(OpenCart(**_caller_fields(caller)))
    return _cart_envelope(view, cart)


@cart_router.post("", status_code=201)
async def add_to_cart(
    body: AddToCartRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    items = [
        {
            "product_id": item.product_id,
            "quantity": item.quantity,
            "price": item.price,
            "notes": text_payload(item.notes),
        }
        for item in body.items
    ]
    command = AddItemsToCart(
        **_caller_fields(caller),
        items=_dumps([{k: v for k, v in item.items() if v is not None} for item in items]),
        notes=_dumps(text_payload(body.notes)),
    )
    return _cart_envelope(view, _process(command))


@cart_router.delete("")
async def clear_cart(caller: Caller = Depends(current_caller), view: Projector = Depends(projector)) -> dict:
    return _cart_envelope(view, _process(ClearCart(**_caller_fields(caller))))


@cart_router.get("/admin")
async def list_carts(caller: Caller = Depends(admin_caller), view: Projector = Depends(projector)) -> dict:
    listing = list_all_carts(caller)
    return {
        "status": "success",
        "results": listing.total_carts,
        "data": {
            "carts": [view.cart(cart) for cart in listing.carts],
            "summary": {
                "totalCarts": listing.total_carts,
                "nonEmptyCarts": listing.non_empty_carts,
                "totalQuantity": listing.total_quantity,
            },
        },
    }


@cart_router.patch("/admin/{cart_id}")
async def admin_update_cart(
    cart_id: str,
    body: AdminUpdateCartRequest,
    caller: Caller = Depends(admin_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = AdminUpdateCart(
        **_caller_fields(caller),
        cart_id=cart_id,
        discount=body.discount,
        discount_description=_dumps(text_payload(body.discount_description)),
        notes=_dumps(text_payload(body.notes)),
        clear_notes="notes" in body.model_fields_set and body.notes is None,
        status=body.status,
    )
    return _cart_envelope(view, _process(command))


@cart_router.delete("/admin/{cart_id}")
async def admin_delete_cart(cart_id: str, caller: Caller = Depends(admin_caller)) -> dict:
    _process(AdminDeleteCart(**_caller_fields(caller), cart_id=cart_id))
    return {"status": "success", "data": None}


@cart_router.patch("/notes")
async def update_cart_notes(
    body: NotesRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = UpdateCartNotes(**_caller_fields(caller), notes=_dumps(text_payload(body.notes)))
    return _cart_envelope(view, _process(command))


@cart_router.patch("/discount")
async def apply_cart_discount(
    body: ApplyDiscountRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = ApplyCartDiscount(
        **_caller_fields(caller),
        discount=body.discount,
        description=_dumps(text_payload(body.description)),
    )
    return _cart_envelope(view, _process(command))


@cart_router.post("/checkout", status_code=201)
async def checkout_cart(
    body: CheckoutRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    """Convert the caller's cart into an order.

    1. Place an order from the cart items (discount folded into unit prices)
    2. Mark the cart as converted
    3. Open a fresh, empty cart for the caller
    """
    command = CheckoutCart(
        **_caller_fields(caller),
        shipping_address=_dumps(body.shipping_address.model_dump(exclude_none=True)),
        payment_method=body.payment_method,
        notes=_dumps(text_payload(body.notes)),
    )
    order = _process(command)
    return {"status": "success", "data": {"order": view.order(order)}}


@cart_router.patch("/{product_id}")
async def update_cart_item_quantity(
    product_id: str,
    body: UpdateCartQuantityRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = UpdateCartItemQuantity(**_caller_fields(caller), product_id=product_id, quantity=body.quantity)
    return _cart_envelope(view, _process(command))


@cart_router.delete("/{product_id}")
async def remove_cart_item(
    product_id: str,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = RemoveCartItem(**_caller_fields(caller), product_id=product_id)
    return _cart_envelope(view, _process(command))


@cart_router.patch("/{product_id}/notes")
async def update_cart_item_notes(
    product_id: str,
    body: NotesRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = UpdateCartItemNotes(
        **_caller_fields(caller),
        product_id=product_id,
        notes=_dumps(text_payload(body.notes)),
    )
    return _cart_envelope(view, _process(command))


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


def _order_envelope(view: Projector, order) -> dict:
    return {"status": "success", "data": {"order": view.order(order)}}


@order_router.post("", status_code=201)
async def create_order(
    body: CreateOrderRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = PlaceOrder(
        **_caller_fields(caller),
        items=_dumps([item.model_dump() for item in body.items]),
        shipping_address=_dumps(body.shipping_address.model_dump(exclude_none=True)),
        payment_method=body.payment_method,
        notes=_dumps(text_payload(body.notes)),
        total_order_price=body.total_order_price,
    )
    return _order_envelope(view, _process(command))


@order_router.get("/myorders")
async def my_orders(caller: Caller = Depends(current_caller), view: Projector = Depends(projector)) -> dict:
    orders = list_my_orders(caller)
    return {
        "status": "success",
        "results": len(orders),
        "data": {"orders": [view.order(order) for order in orders]},
    }


@order_router.get("/admin")
@order_router.get("/all")
async def all_orders(
    status: str | None = Query(default=None),
    payment_status: str | None = Query(default=None, alias="paymentStatus"),
    owner_id: str | None = Query(default=None, alias="ownerId"),
    page: int = Query(default=1),
    limit: int | None = Query(default=None),
    caller: Caller = Depends(admin_caller),
    view: Projector = Depends(projector),
) -> dict:
    result = list_all_orders(
        caller,
        status=status,
        payment_status=payment_status,
        owner_id=owner_id,
        page=page,
        limit=limit,
    )
    return {
        "status": "success",
        "results": len(result.orders),
        "data": {
            "orders": [view.order(order) for order in result.orders],
            "pagination": {
                "currentPage": result.current_page,
                "totalPages": result.total_pages,
                "totalOrders": result.total_orders,
                "hasNextPage": result.has_next_page,
                "hasPrevPage": result.has_prev_page,
                "limit": result.limit,
            },
            "summary": {
                "totalRevenue": result.total_revenue,
                "averageOrderValue": result.average_order_value,
            },
        },
    }


@order_router.get("/user/{owner_id}")
async def orders_by_owner(
    owner_id: str,
    caller: Caller = Depends(admin_caller),
    view: Projector = Depends(projector),
) -> dict:
    result = list_orders_by_owner(caller, owner_id)
    return {
        "status": "success",
        "results": result.total_orders,
        "data": {
            "orders": [view.order(order) for order in result.orders],
            "summary": {"totalOrders": result.total_orders, "totalRevenue": result.total_revenue},
        },
    }


@order_router.get("/{order_id}")
async def get_order_by_id(
    order_id: str,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    return _order_envelope(view, get_order(caller, order_id))


@order_router.patch("/{order_id}")
async def update_order(
    order_id: str,
    body: UpdateOrderRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = UpdateOrder(**_caller_fields(caller), order_id=order_id, changes=_dumps(body.changes()))
    return _order_envelope(view, _process(command))


@order_router.delete("/{order_id}")
async def delete_order(
    order_id: str,
    caller: Caller = Depends(admin_caller),
    view: Projector = Depends(projector),
) -> dict:
    return _order_envelope(view, _process(DeactivateOrder(**_caller_fields(caller), order_id=order_id)))


@order_router.patch("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    return _order_envelope(view, _process(CancelOrder(**_caller_fields(caller), order_id=order_id)))


@order_router.patch("/{order_id}/status")
async def update_order_status(
    order_id: str,
    body: OrderStatusRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = TransitionOrderStatus(**_caller_fields(caller), order_id=order_id, status=body.status)
    return _order_envelope(view, _process(command))


@order_router.patch("/{order_id}/payment")
async def update_payment_status(
    order_id: str,
    body: PaymentStatusRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = UpdatePaymentStatus(
        **_caller_fields(caller),
        order_id=order_id,
        payment_status=body.payment_status,
    )
    return _order_envelope(view, _process(command))


@order_router.patch("/{order_id}/pay")
async def mark_order_paid(
    order_id: str,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    return _order_envelope(view, _process(MarkOrderPaid(**_caller_fields(caller), order_id=order_id)))


@order_router.patch("/{order_id}/notes")
async def update_order_notes(
    order_id: str,
    body: NotesRequest,
    caller: Caller = Depends(current_caller),
    view: Projector = Depends(projector),
) -> dict:
    command = UpdateOrderNotes(
        **_caller_fields(caller),
        order_id=order_id,
        notes=_dumps(text_payload(body.notes)),
    )
    return _order_envelope(view, _process(command))
