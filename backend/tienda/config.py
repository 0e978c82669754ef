"""
tienda/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment
and exposes the Firestore client through `get_db()`. Firebase Admin SDK is initialized
on first use, so importing the package (tests, scripts) never requires credentials.
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    firebase_cred_file: str = Field('firebase_service_account.json', alias='FIREBASE_CRED_FILE')
    firebase_project_id: Optional[str] = Field(None, alias='FIREBASE_PROJECT_ID')

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = Field(None, alias='FIREBASE_PRIVATE_KEY_ID')
    firebase_private_key: Optional[str] = Field(None, alias='FIREBASE_PRIVATE_KEY')
    firebase_client_email: Optional[str] = Field(None, alias='FIREBASE_CLIENT_EMAIL')
    firebase_client_id: Optional[str] = Field(None, alias='FIREBASE_CLIENT_ID')
    firebase_auth_uri: Optional[str] = Field(None, alias='FIREBASE_AUTH_URI')
    firebase_token_uri: Optional[str] = Field(None, alias='FIREBASE_TOKEN_URI')
    firebase_auth_provider_x509_cert_url: Optional[str] = Field(None, alias='FIREBASE_AUTH_PROVIDER_X509_CERT_URL')
    firebase_client_x509_cert_url: Optional[str] = Field(None, alias='FIREBASE_CLIENT_X509_CERT_URL')

    debug: bool = Field(False, alias='DEBUG')
    allowed_origins: str = Field('*', alias='ALLOWED_ORIGINS')  # Comma-separated list or '*' for all

    # Local disk uploads (served by the front-end under /uploads)
    upload_dir: str = Field('public/uploads', alias='UPLOAD_DIR')
    upload_url_prefix: str = Field('/uploads', alias='UPLOAD_URL_PREFIX')
    max_upload_bytes: int = Field(5 * 1024 * 1024, alias='MAX_UPLOAD_BYTES')

    low_stock_threshold: int = Field(5, alias='LOW_STOCK_THRESHOLD')
    collection_prefix: str = Field('', alias='FIREBASE_COLLECTION_PREFIX')

    def collection(self, name: str) -> str:
        """Prefix-aware collection name (staging and prod can share a project)."""
        prefix = (self.collection_prefix or "").strip()
        return f"{prefix}{name}" if prefix else name

    @property
    def origins(self) -> list[str]:
        if not self.allowed_origins or self.allowed_origins.strip() == "*":
            return ["*"]
        return [origin.strip() for origin in self.allowed_origins.split(',') if origin.strip()]

    def has_env_credentials(self) -> bool:
        return all([
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ])


# Load settings from environment (.env file, etc.)
settings = Settings()


def _build_credential(cfg: Settings) -> credentials.Certificate:
    if cfg.has_env_credentials():
        # Use environment variables for Firebase credentials (Cloud Run)
        return credentials.Certificate({
            "type": "service_account",
            "project_id": cfg.firebase_project_id,
            "private_key_id": cfg.firebase_private_key_id,
            # env vars carry the key with escaped newlines
            "private_key": cfg.firebase_private_key.replace("\\n", "\n"),
            "client_email": cfg.firebase_client_email,
            "client_id": cfg.firebase_client_id,
            "auth_uri": cfg.firebase_auth_uri,
            "token_uri": cfg.firebase_token_uri,
            "auth_provider_x509_cert_url": cfg.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": cfg.firebase_client_x509_cert_url,
        })
    # Use service account file (local development)
    return credentials.Certificate(cfg.firebase_cred_file)


def init_firebase(cfg: Settings = settings) -> firebase_admin.App:
    """Initialize the default Firebase app once; later calls return the existing one."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        options = {'projectId': cfg.firebase_project_id} if cfg.firebase_project_id else None
        return firebase_admin.initialize_app(_build_credential(cfg), options)


@lru_cache(maxsize=1)
def get_db():
    """Firestore database client (FastAPI dependency and repository default)."""
    init_firebase()
    return firestore.client()
