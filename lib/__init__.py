# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Supabase client factory and backend error translation
# - utils.py: Shared utilities (UUID normalization, UTC timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import create_supabase_client, translate_backend_error
from lib.utils import ensure_utc, normalize_uuid, utc_now

__all__ = [
    # Supabase
    "create_supabase_client",
    "translate_backend_error",
    # Utils
    "ensure_utc",
    "normalize_uuid",
    "utc_now",
]
