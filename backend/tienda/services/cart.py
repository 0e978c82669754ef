"""
# `tienda/services/cart.py` - Carrito: reducer y persistencia

## Información general
The cart is a pure state machine: `reduce(state, action) -> state`. No globals, no I/O;
the same function is used by the `/cart` router and by the tests.

| Acción        | Efecto |
|---------------|--------|
| `AddItem`     | Same (productId, weight) → quantities are summed, else the line is appended |
| `RemoveItem`  | Drops the matching line (no-op when missing) |
| `SetQuantity` | `quantity = max(1, quantity)` for the matching line (no-op when missing) |
| `ClearCart`   | Empty cart |
| `LoadCart`    | Replaces the items with an already validated snapshot |

`AddItem` does not clamp the merged quantity to the line's stock; only the +/- controls
(`increment` / `decrement`) respect the stock ceiling.

Totals (`total`, `totalItems`, `totalAmount`) are computed fields on the models, so
they are recalculated from the items on every transition.

## Persistencia
The stored blob is a JSON array of lines. `load_items` keeps entries with `productId`,
`name`, `image`, a numeric `price` and whole-number `weight` and `quantity`; anything else is dropped
(never repaired) and counted in `LoadResult.dropped`. Missing `stock` falls back to 999.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from tienda.schemas.cart import DEFAULT_STOCK, CartLine, CartState
from tienda.utils.numbers import is_number, is_whole

logger = logging.getLogger("tienda.cart")


# ---------- actions ----------
@dataclass(frozen=True)
class AddItem:
    line: CartLine


@dataclass(frozen=True)
class RemoveItem:
    product_id: str
    weight: int


@dataclass(frozen=True)
class SetQuantity:
    product_id: str
    weight: int
    quantity: int


@dataclass(frozen=True)
class ClearCart:
    pass


@dataclass(frozen=True)
class LoadCart:
    items: Sequence[CartLine]


CartAction = Union[AddItem, RemoveItem, SetQuantity, ClearCart, LoadCart]


# ---------- reducer ----------
def _with_items(items) -> CartState:
    return CartState(items=tuple(items))


def _add(state: CartState, new: CartLine) -> CartState:
    if state.find(*new.key) is None:
        return _with_items([*state.items, new])
    return _with_items(
        line.model_copy(update={"quantity": line.quantity + new.quantity}) if line.key == new.key else line
        for line in state.items
    )


def _set_quantity(state: CartState, action: SetQuantity) -> CartState:
    key = (action.product_id, action.weight)
    if state.find(*key) is None:
        return state
    quantity = max(1, action.quantity)
    return _with_items(
        line.model_copy(update={"quantity": quantity}) if line.key == key else line
        for line in state.items
    )


def reduce(state: CartState, action: CartAction) -> CartState:
    if isinstance(action, AddItem):
        return _add(state, action.line)
    if isinstance(action, RemoveItem):
        key = (action.product_id, action.weight)
        return _with_items(line for line in state.items if line.key != key)
    if isinstance(action, SetQuantity):
        return _set_quantity(state, action)
    if isinstance(action, ClearCart):
        return CartState()
    if isinstance(action, LoadCart):
        return _with_items(action.items)
    return state


def increment(state: CartState, product_id: str, weight: int) -> CartState:
    """`+` control: one more unit, never above the stock snapshot."""
    line = state.find(product_id, weight)
    if line is None or line.quantity >= line.stock:
        return state
    return reduce(state, SetQuantity(product_id, weight, line.quantity + 1))


def decrement(state: CartState, product_id: str, weight: int) -> CartState:
    """`-` control: one less unit, never below 1."""
    line = state.find(product_id, weight)
    if line is None:
        return state
    return reduce(state, SetQuantity(product_id, weight, line.quantity - 1))


# ---------- persistence boundary ----------
@dataclass(frozen=True)
class LoadResult:
    items: Tuple[CartLine, ...] = ()
    dropped: int = 0
    corrupt: bool = False

    def state(self) -> CartState:
        return reduce(CartState(), LoadCart(self.items))


def _line_from_raw(raw: Any) -> Optional[CartLine]:
    if not isinstance(raw, dict):
        return None
    if not all(isinstance(raw.get(k), str) and raw.get(k) for k in ("productId", "name", "image")):
        return None
    if not all(is_number(raw.get(k)) for k in ("price", "weight", "quantity")):
        return None

    stock = raw.get("stock")
    if not is_whole(stock) or not stock:
        stock = DEFAULT_STOCK
    try:
        return CartLine(
            product_id=raw["productId"],
            name=raw["name"],
            price=raw["price"],
            weight=raw["weight"],
            quantity=raw["quantity"],
            image=raw["image"],
            stock=int(stock),
        )
    except ValidationError:
        # fractional weight/quantity
        return None


def load_items(raw: Any) -> LoadResult:
    """Validate a decoded snapshot. Never raises."""
    if raw is None:
        return LoadResult()
    if not isinstance(raw, list):
        logger.debug("Stored cart is not a list (%s); starting empty", type(raw).__name__)
        return LoadResult(corrupt=True)

    items = []
    for entry in raw:
        line = _line_from_raw(entry)
        if line is not None:
            items.append(line)
    dropped = len(raw) - len(items)
    if dropped:
        logger.debug("Dropped %d malformed cart entries", dropped)
    return LoadResult(items=tuple(items), dropped=dropped)


def loads(blob: Union[str, bytes, None]) -> LoadResult:
    """Decode the stored JSON text; undecodable text loads as an empty cart."""
    if not blob:
        return LoadResult()
    try:
        raw = json.loads(blob)
    except (TypeError, ValueError):
        logger.debug("Stored cart is not valid JSON; starting empty")
        return LoadResult(corrupt=True)
    return load_items(raw)


def dump_items(state: CartState) -> list:
    """Write shape: every line with all eight keys."""
    return [line.to_doc() for line in state.items]


def dumps(state: CartState) -> str:
    return json.dumps(dump_items(state), ensure_ascii=False)
