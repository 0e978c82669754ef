# tienda/repositories/base.py
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import FieldFilter

from tienda.config import settings
from tienda.core.errors import NotFoundError


def snap_to_dict(snap) -> Dict[str, Any]:
    data = snap.to_dict() or {}
    data["id"] = snap.id
    return data


class FirestoreRepository:
    """Thin wrapper over one (prefix-aware) Firestore collection."""
    collection_name: str = ""
    not_found_message: str = "No encontrado"

    def __init__(self, db):
        self.db = db

    @property
    def col(self):
        return self.db.collection(settings.collection(self.collection_name))

    def get(self, doc_id: str) -> Optional[Dict[str, Any]]:
        snap = self.col.document(doc_id).get()
        if not snap.exists:
            return None
        return snap_to_dict(snap)

    def require(self, doc_id: str) -> Dict[str, Any]:
        doc = self.get(doc_id)
        if doc is None:
            raise NotFoundError(doc_id, self.not_found_message)
        return doc

    def find(self, **equals) -> List[Dict[str, Any]]:
        q = self.col
        for field, value in equals.items():
            q = q.where(filter=FieldFilter(field, "==", value))
        return [snap_to_dict(s) for s in q.stream()]

    def all(self) -> List[Dict[str, Any]]:
        return [snap_to_dict(s) for s in self.col.stream()]

    def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        ref = self.col.document()
        payload = {k: v for k, v in data.items() if k != "id"}
        ref.set(payload)
        return {**payload, "id": ref.id}

    def replace(self, doc_id: str, data: Dict[str, Any]) -> Dict[str, Any]:
        payload = {k: v for k, v in data.items() if k != "id"}
        self.col.document(doc_id).set(payload)
        return {**payload, "id": doc_id}

    def update(self, doc_id: str, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        ref = self.col.document(doc_id)
        if not ref.get().exists:
            return None
        ref.update(fields)
        return self.get(doc_id)

    def delete(self, doc_id: str) -> bool:
        ref = self.col.document(doc_id)
        if not ref.get().exists:
            return False
        ref.delete()
        return True
