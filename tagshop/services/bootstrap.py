"""Shop Bootstrap — wires settings, adapters and engine into a TagsActions facade.

Invariants:
    - Single wiring point: the only module that imports both services and infrastructure adapters
    - Ledger client created only when ledger_enabled; closed by TagsActions.aclose()
"""

import logging

from sqlalchemy.engine import make_url

from tagshop.config import Settings
from tagshop.core.shop_context import ShopContext
from tagshop.infrastructure.database import DatabaseSessionManager
from tagshop.infrastructure.ledger_client import HttpLedgerClient
from tagshop.infrastructure.ownership_store import SqlOwnershipStore
from tagshop.infrastructure.reconciliation_log import SqlReconciliationLog
from tagshop.services.event_notifier import ObserverNotifier
from tagshop.services.tag_transactions import TransactionEngine
from tagshop.services.tags_actions import TagsActions

logger = logging.getLogger(__name__)


def build_tags_actions(
    settings: Settings,
    manager: DatabaseSessionManager,
    notifier: ObserverNotifier | None = None,
) -> TagsActions:
    context = ShopContext.create(
        settings.tags, settings.display_name_format, settings.ledger_enabled,
    )
    ledger = None
    if settings.ledger_enabled:
        ledger = HttpLedgerClient(
            settings.ledger_base_url,
            api_key=settings.ledger_api_key,
            max_retries=settings.ledger_max_retries,
            base_delay_ms=settings.ledger_base_delay_ms,
            max_delay_ms=settings.ledger_max_delay_ms,
            timeout_seconds=settings.ledger_timeout_seconds,
        )
    engine = TransactionEngine(
        context,
        SqlOwnershipStore(manager),
        notifier or ObserverNotifier(),
        ledger=ledger,
        reconciliation=SqlReconciliationLog(manager),
    )
    logger.info(
        f"Tag shop ready: {len(context.catalog)} tag(s), "
        f"ledger {'enabled' if ledger else 'disabled'}",
    )
    return TagsActions(
        engine,
        data_location=make_url(settings.database_url).render_as_string(
            hide_password=True,
        ),
        on_close=ledger.aclose if ledger else None,
    )
