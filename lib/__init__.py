# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Singleton Supabase client
# - email_client.py: Resend REST client for transactional email
# - utils.py: Shared utilities (client identifier, timestamps)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.email_client import EmailClientError, ResendEmailClient
from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.utils import client_identifier

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Email
    "EmailClientError",
    "ResendEmailClient",
    # Utils
    "client_identifier",
]
