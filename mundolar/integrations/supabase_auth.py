from typing import Any
from mundolar.config import get_config
from mundolar.logging import get_logger

class SupabaseAuthentication:
    """Handles Supabase client creation using the AppConfig singleton."""
    def __init__(self) -> None:
        """Initializes the authentication handler using the singleton AppConfig."""
        self.config = get_config()
        self.logger = get_logger(__name__)

    def _require_url(self) -> str:
        if not self.config.supabase_url:
            self.logger.error("Missing Supabase configuration values.")
            raise RuntimeError("Missing Supabase configuration values.")
        return self.config.supabase_url

    def get_public_client(self) -> Any:
        """Returns a Supabase client authenticated with the anon key.

        Used for storefront reads, subject to row level security.

        Returns:
            supabase.Client: The Supabase client instance.
        Raises:
            RuntimeError: If required configuration is missing.
        """
        from supabase import create_client
        url = self._require_url()
        if not self.config.supabase_anon_key:
            self.logger.error("Missing Supabase anon key.")
            raise RuntimeError("Missing Supabase anon key.")
        self.logger.info(f"Instantiating public Supabase client for: {url}")
        return create_client(url, self.config.supabase_anon_key)

    def get_admin_client(self) -> Any:
        """Returns a Supabase client authenticated with the service role key.

        Sessions are neither persisted nor refreshed; the client acts as the
        service role for admin operations (auth admin API, profile writes).

        Returns:
            supabase.Client: The Supabase client instance.
        Raises:
            RuntimeError: If required configuration is missing.
        """
        from supabase import ClientOptions, create_client
        url = self._require_url()
        if not self.config.supabase_service_role_key:
            self.logger.error("Missing Supabase service role key.")
            raise RuntimeError("Missing Supabase service role key.")
        self.logger.info(f"Instantiating admin Supabase client for: {url}")
        return create_client(
            url,
            self.config.supabase_service_role_key,
            options=ClientOptions(auto_refresh_token=False, persist_session=False),
        )

def get_supabase_auth() -> SupabaseAuthentication:
    """Returns a new SupabaseAuthentication instance using the latest config."""
    return SupabaseAuthentication()
