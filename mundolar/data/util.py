from __future__ import annotations

from typing import Literal, Optional

from mundolar.config import get_config

from .interface import DataAccess


def get_data_access(kind: Optional[Literal["csv", "supabase"]] = None) -> DataAccess:
    kind = kind or get_config().data_backend
    if kind == "csv":
        from .backends.csv_backend import CsvDataAccess

        # Reads from configured CSV folder
        return CsvDataAccess(data_dir=get_config().data_dir)
    if kind == "supabase":
        from mundolar.integrations.supabase_auth import get_supabase_auth
        from .backends.supabase_backend import SupabaseDataAccess

        # Storefront reads go through the public (anon) key
        return SupabaseDataAccess(get_supabase_auth().get_public_client())
    raise ValueError(f"Unknown data access kind: {kind}")
