"""
tienda/routers/carts.py
Cart endpoints (logged-in users). Every request is: load the stored item array →
validate → apply one reducer action → persist the new array.

Behavior
- Add uses productId + weight + quantity; name, image, tier price and tier stock are
  snapshotted from the product at add time (later price changes do not touch the line).
- A new line is capped at the tier stock; adding the same (productId, weight) again
  sums the quantities without a cap.
- Quantity updates never go below 1; the +/- endpoints respect the stock snapshot.
- Malformed stored entries are silently dropped on load.
"""
import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Query

from tienda.core.security import get_current_user
from tienda.repositories.carts import CartRepository, get_cart_repo
from tienda.repositories.products import ProductRepository, get_product_repo
from tienda.schemas.cart import AddItemBody, CartLine, CartState, LineRef, SetQuantityBody
from tienda.services import cart as cart_service
from tienda.services.catalog import main_image

logger = logging.getLogger("tienda.cart")

router = APIRouter(prefix="/cart", tags=["Cart"])


def _load(repo: CartRepository, uid: str) -> CartState:
    result = cart_service.load_items(repo.load_raw(uid))
    if result.corrupt:
        logger.warning("Cart %s: stored items are unreadable; starting empty", uid)
    elif result.dropped:
        logger.debug("Cart %s: %d stored entries dropped", uid, result.dropped)
    return result.state()


def _commit(repo: CartRepository, uid: str, before: CartState, after: CartState) -> Dict[str, Any]:
    if after != before:
        repo.save(uid, cart_service.dump_items(after))
    return after.to_doc()


@router.get("", summary="Get Cart")
def get_cart(current_user: dict = Depends(get_current_user), repo: CartRepository = Depends(get_cart_repo)):
    return _load(repo, current_user["id"]).to_doc()


@router.post("/items", summary="Add Item")
def add_to_cart(
    payload: AddItemBody,
    current_user: dict = Depends(get_current_user),
    repo: CartRepository = Depends(get_cart_repo),
    products: ProductRepository = Depends(get_product_repo),
):
    product = products.get(payload.product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Producto no encontrado")
    tier = next((t for t in product.get("pricesByWeight") or [] if t.get("weight") == payload.weight), None)
    if tier is None:
        raise HTTPException(status_code=400, detail=f"El producto no se vende en {payload.weight}g")
    if (tier.get("stock") or 0) <= 0:
        raise HTTPException(status_code=409, detail="Sin stock para el peso seleccionado")

    uid = current_user["id"]
    state = _load(repo, uid)
    quantity = payload.quantity
    if state.find(payload.product_id, payload.weight) is None:
        quantity = min(quantity, tier["stock"])

    line = CartLine(
        product_id=payload.product_id,
        name=product.get("name", ""),
        price=tier.get("price", 0),
        weight=payload.weight,
        quantity=quantity,
        image=main_image(product),
        stock=tier["stock"],
    )
    return _commit(repo, uid, state, cart_service.reduce(state, cart_service.AddItem(line)))


@router.patch("/items", summary="Set Quantity")
def set_quantity(
    payload: SetQuantityBody,
    current_user: dict = Depends(get_current_user),
    repo: CartRepository = Depends(get_cart_repo),
):
    uid = current_user["id"]
    state = _load(repo, uid)
    action = cart_service.SetQuantity(payload.product_id, payload.weight, payload.quantity)
    return _commit(repo, uid, state, cart_service.reduce(state, action))


@router.post("/items/increment", summary="Increment Quantity")
def increment_item(
    payload: LineRef,
    current_user: dict = Depends(get_current_user),
    repo: CartRepository = Depends(get_cart_repo),
):
    uid = current_user["id"]
    state = _load(repo, uid)
    return _commit(repo, uid, state, cart_service.increment(state, payload.product_id, payload.weight))


@router.post("/items/decrement", summary="Decrement Quantity")
def decrement_item(
    payload: LineRef,
    current_user: dict = Depends(get_current_user),
    repo: CartRepository = Depends(get_cart_repo),
):
    uid = current_user["id"]
    state = _load(repo, uid)
    return _commit(repo, uid, state, cart_service.decrement(state, payload.product_id, payload.weight))


@router.delete("/items", summary="Remove Item")
def remove_cart_item(
    product_id: str = Query(..., alias="productId"),
    weight: int = Query(...),
    current_user: dict = Depends(get_current_user),
    repo: CartRepository = Depends(get_cart_repo),
):
    """Removing a line that is not in the cart is a no-op."""
    uid = current_user["id"]
    state = _load(repo, uid)
    return _commit(repo, uid, state, cart_service.reduce(state, cart_service.RemoveItem(product_id, weight)))


@router.delete("", status_code=204, summary="Clear Cart")
def clear_cart(current_user: dict = Depends(get_current_user), repo: CartRepository = Depends(get_cart_repo)):
    repo.clear(current_user["id"])
