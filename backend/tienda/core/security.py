"""
# `tienda/core/security.py` - Autenticación

Este módulo valida el **Firebase ID Token** del header
`Authorization: Bearer <token>` y expone dos dependencias de FastAPI:

- `get_current_user` → 401 si falta el token o si es inválido / expirado / revocado.
- `get_current_admin` → además exige el custom claim `admin=True`
  (se asigna con `scripts/set_admin_claim.py`).

> `firebase_admin` se inicializa en `tienda.config.init_firebase()`.
"""
from typing import Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from firebase_admin import auth as firebase_auth

from tienda.config import init_firebase

# HTTPBearer is a FastAPI provided security scheme for "Authorization: Bearer <token>" header
oauth2_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(oauth2_scheme)
) -> Dict:
    """Valida el Firebase ID token (incluida la revocación) y devuelve el usuario."""
    if not credentials or not credentials.scheme or not credentials.credentials:
        raise _unauthorized("Token de autorización requerido")

    init_firebase()
    try:
        # check_revoked=True -> tokens issued before a logout are rejected
        decoded = firebase_auth.verify_id_token(credentials.credentials, check_revoked=True)
    except firebase_auth.ExpiredIdTokenError:
        raise _unauthorized("Token expirado")
    except firebase_auth.RevokedIdTokenError:
        raise _unauthorized("Sesión revocada")
    except (firebase_auth.InvalidIdTokenError, ValueError):
        raise _unauthorized("Token inválido")

    uid = decoded.get("uid")
    if not uid:
        raise _unauthorized("Token inválido")

    return {
        "id": uid,
        "email": decoded.get("email"),
        "name": decoded.get("name"),
        "is_admin": decoded.get("admin") is True,
    }


def get_current_admin(current_user: dict = Depends(get_current_user)) -> Dict:
    """
    Dependency to allow access only to admin users.
    Uses get_current_user to authenticate, then checks the custom claim.
    """
    if not current_user.get("is_admin"):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Acceso denegado. Solo administradores.",
        )
    return current_user
