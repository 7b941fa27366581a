from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict

class AppConfig(BaseSettings):
    """Application configuration using Pydantic BaseSettings.

    Loads configuration from environment variables and .env file (if present).
    Fields are type-checked and validated. Defaults are provided where appropriate.
    """
    # Supabase
    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None

    # Cloudflare R2 (S3-compatible object storage)
    r2_account_id: Optional[str] = None
    r2_access_key_id: Optional[str] = None
    r2_secret_access_key: Optional[str] = None
    r2_bucket_name: Optional[str] = None
    r2_public_url: Optional[str] = None

    # Application
    app_env: str = "local"
    log_level: str = "DEBUG"
    site_url: str = "http://localhost:8501"

    # Data source
    data_backend: str = "csv"
    data_dir: str = "sample_data"

    # Catalog
    catalog_page_size: int = 16
    featured_products_limit: int = 12
    home_categories_limit: int = 4
    related_products_limit: int = 4

    # Cart
    cart_storage_path: str = ".mundolar/local_storage.json"
    cart_ttl_hours: int = 24

    # Uploads
    upload_url_expiry_seconds: int = 300

    # Contact
    whatsapp_phone: str = "573052200300"
    contact_email: str = "ventas@mundolar.com.co"

    # Seed data settings
    default_seed_products: int = 48
    default_seed_value: int = 42

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

_config: Optional[AppConfig] = None

def get_config() -> AppConfig:
    """Return the AppConfig instance (singleton pattern)."""
    global _config
    if _config is None:
        _config = AppConfig()
    return _config

def set_config_for_test(**kwargs):
    """For testing only: override the AppConfig instance with new values."""
    global _config
    _config = AppConfig(**kwargs)
