"""
tienda/core/errors.py - Domain exceptions shared by services and routers.

Services raise these; routers (or the handlers registered in `main.py`) translate
them into HTTP responses.
"""
from typing import List, NamedTuple


class FieldError(NamedTuple):
    """One user-correctable problem, scoped to a form field."""
    field: str
    message: str

    def as_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class ProductValidationError(Exception):
    """A product draft or update failed validation; nothing must be persisted."""

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__("; ".join(f"{e.field}: {e.message}" for e in self.errors))

    @property
    def fields(self) -> List[str]:
        return [e.field for e in self.errors]

    def as_payload(self) -> dict:
        return {
            "message": "Error de validación",
            "errors": [e.as_dict() for e in self.errors],
        }


class NotFoundError(Exception):
    """A document looked up by id does not exist."""

    def __init__(self, doc_id: str, message: str = "No encontrado"):
        self.doc_id = doc_id
        self.message = message
        super().__init__(f"{doc_id}: {message}")
