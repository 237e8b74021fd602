# =============================================================================
# app/bootstrap.py - Process Start Wiring
# =============================================================================
# Builds everything a process needs to work with records:
# - Logging configured from settings
# - One Supabase client, injected into one store per record type
#
# Usage:
#   from app.bootstrap import configure_logging, create_record_stores
#   configure_logging()
#   stores = create_record_stores()
#   stores.payments.find_many({"user_id": user_id})
# =============================================================================

import logging
from dataclasses import dataclass

from supabase import Client

from app.config import Settings, get_settings
from core.services import PaymentStore, UserSupplementStore
from lib.supabase_client import create_supabase_client

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class RecordStores:
    """The record stores of one process, sharing one client."""
    payments: PaymentStore
    user_supplements: UserSupplementStore


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging (DEBUG when settings.DEBUG is on)."""
    settings = settings or get_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format=LOG_FORMAT,
    )


def create_record_stores(
    client: Client | None = None,
    settings: Settings | None = None,
) -> RecordStores:
    """
    Build the record stores.

    Args:
        client: Backend client to inject. Built from settings when omitted.
        settings: Settings to use (defaults to the cached global settings)

    Returns:
        RecordStores with one store per record type

    Raises:
        BackendUnavailableError: If a client has to be built and can't be
    """
    settings = settings or get_settings()
    if client is None:
        client = create_supabase_client(settings)
    strict = settings.STRICT_RECORD_VALIDATION

    stores = RecordStores(
        payments=PaymentStore(client, table_name=settings.PAYMENTS_TABLE, strict=strict),
        user_supplements=UserSupplementStore(
            client,
            table_name=settings.USER_SUPPLEMENTS_TABLE,
            strict=strict,
        ),
    )
    logger.info(
        f"Record stores ready (payments={settings.PAYMENTS_TABLE}, "
        f"user_supplements={settings.USER_SUPPLEMENTS_TABLE}, strict={strict})"
    )
    return stores
