#!/usr/bin/env python3
"""
Agrega el custom claim `admin` a un usuario con Firebase Admin SDK.

Uso: python scripts/set_admin_claim.py <email> [--revoke]
The user must sign out and sign in again for the claim to reach their ID token.
"""
import argparse
import sys

from firebase_admin import auth

from tienda.config import init_firebase


def set_admin_claim(user_email: str, admin: bool = True) -> bool:
    """Agrega (o quita) el claim `admin` conservando los demás claims del usuario."""
    init_firebase()
    try:
        user = auth.get_user_by_email(user_email)
    except auth.UserNotFoundError:
        print(f"❌ Usuario no encontrado: {user_email}")
        return False

    claims = dict(user.custom_claims or {})
    if admin:
        claims["admin"] = True
    else:
        claims.pop("admin", None)
    auth.set_custom_user_claims(user.uid, claims or None)

    # Verificar
    user = auth.get_user(user.uid)
    print(f"✅ Custom claims de {user.email}: {user.custom_claims}")
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Grant or revoke the admin claim of a Firebase user.")
    parser.add_argument("email")
    parser.add_argument("--revoke", action="store_true", help="quitar el claim admin")
    args = parser.parse_args(argv)
    return 0 if set_admin_claim(args.email, admin=not args.revoke) else 1


if __name__ == "__main__":
    sys.exit(main())
