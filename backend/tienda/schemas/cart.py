"""
tienda/schemas/cart.py - Pydantic models for the cart.

A line is identified by (productId, weight). `price` and `stock` are snapshots taken
from the weight tier when the line was added; `total` is always price * quantity.
Persisted shape of one line: productId, name, price, weight, quantity, image, total, stock.
"""
from typing import Tuple

from pydantic import ConfigDict, Field, computed_field

from tienda.schemas.base import CamelModel, Number

DEFAULT_STOCK = 999


class CartLine(CamelModel):
    model_config = ConfigDict(frozen=True)

    product_id: str = Field(..., description="ID del producto")
    name: str = Field(..., description="Nombre del producto")
    price: Number = Field(..., description="Precio unitario al momento de agregar")
    weight: int = Field(..., description="Peso en gramos")
    quantity: int = Field(..., description="Cantidad")
    image: str = Field(..., description="URL de la imagen")
    stock: int = Field(DEFAULT_STOCK, description="Stock del peso al momento de agregar")

    @computed_field
    @property
    def total(self) -> Number:
        return self.price * self.quantity

    @property
    def key(self) -> Tuple[str, int]:
        return (self.product_id, self.weight)


class CartState(CamelModel):
    model_config = ConfigDict(frozen=True)

    items: Tuple[CartLine, ...] = ()

    @computed_field(alias="totalItems")
    @property
    def total_items(self) -> int:
        return sum(line.quantity for line in self.items)

    @computed_field(alias="totalAmount")
    @property
    def total_amount(self) -> Number:
        return sum(line.total for line in self.items)

    def find(self, product_id: str, weight: int):
        for line in self.items:
            if line.key == (product_id, weight):
                return line
        return None


class AddItemBody(CamelModel):
    """POST /cart/items"""
    product_id: str = Field(..., min_length=1)
    weight: int = Field(..., description="Peso elegido (100, 250, 500 o 1000)")
    quantity: int = Field(1, ge=1, le=10000)


class LineRef(CamelModel):
    product_id: str = Field(..., min_length=1)
    weight: int


class SetQuantityBody(LineRef):
    quantity: int
