"""BaseService — abstract foundation for all marketctl services.

Every service receives a :class:`MarketStore` at construction time.
Services own their transaction boundaries via ``self._store.transaction()``
and hold only ids between calls; every operation re-reads the records it
changes inside its own transaction.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from marketctl.services.result import ErrorCode, ServiceError, ServiceResult

if TYPE_CHECKING:
    from marketctl.domain.records import MarketRecord
    from marketctl.infrastructure.store import MarketStore

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class OrderService(BaseService):
            def complete_order(self, order_id: int) -> ServiceResult:
                with self._store.transaction() as txn:
                    ...
    """

    def __init__(self, store: MarketStore) -> None:
        self._store = store

    @staticmethod
    def _fail(
        op: str,
        code: ErrorCode,
        message: str,
        **detail: Any,
    ) -> ServiceResult:
        """Build a failed result."""
        return ServiceResult(
            ok=False,
            op=op,
            error=ServiceError(code=code, message=message, detail=detail),
        )

    @staticmethod
    def _succeed(
        op: str,
        record: MarketRecord,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        """Build a successful result carrying *record*."""
        return ServiceResult(ok=True, op=op, data=record.to_data(), warnings=warnings or [])

    def _dispatch_event(
        self,
        hook_name: str,
        payload: dict[str, Any],
        warnings: list[str],
    ) -> None:
        """Run a lifecycle hook synchronously. No-op if plugins are not initialized.

        INVARIANT: Plugin failures are warnings, never errors.
        """
        plugins = self._store.plugins
        if plugins is None:
            return
        try:
            getattr(plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook failed for %s", hook_name, exc_info=True)
            warnings.append(f"Plugin hook failed for {hook_name}")
