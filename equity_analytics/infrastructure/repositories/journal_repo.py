"""Journal Repository: Access to trade journal and cash-flow logs.

Provides read access to:
- data/journal.json (trade entries, camelCase keys as exported by the app)
- data/cash_flow.json (deposits and withdrawals)

Records are normalized once, here:
- the legacy `pnl` field is folded into total_realized_pnl
- timestamps (ISO strings or epoch milliseconds) become datetimes
- entries without a timestamp are skipped
"""

import logging
from typing import Any

from equity_analytics.domain.dates import parse_timestamp
from equity_analytics.domain.models import (
    REALIZED_STATUSES,
    CashFlowTransaction,
    JournalEntry,
    TrimEvent,
)
from equity_analytics.infrastructure.config import DataPaths, DEFAULT_PATHS
from equity_analytics.infrastructure.repositories.base import (
    Repository,
    RepositoryError,
    read_json,
)

logger = logging.getLogger(__name__)


def _optional_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


def parse_entry(record: dict) -> JournalEntry | None:
    """Convert one exported journal record into a JournalEntry.

    Args:
        record: Dict with keys ticker, entry, stop, shares, timestamp,
            status, closeDate, totalRealizedPnL, pnl, trimHistory,
            remainingShares, positionSize

    Returns:
        JournalEntry, or None if the record has no timestamp

    Raises:
        ValueError: If the record violates an entry invariant
    """
    if not record.get("timestamp"):
        return None

    status = record.get("status") or "open"

    realized = record.get("totalRealizedPnL")
    if realized is None:
        realized = record.get("pnl")
    if realized is None and status in REALIZED_STATUSES:
        logger.warning(
            "%s entry %s has no realized P&L, booking 0",
            status, record.get("ticker", "?"),
        )
        realized = 0.0

    close_date = record.get("closeDate")
    trims = tuple(
        TrimEvent(date=parse_timestamp(trim["date"]), shares=float(trim["shares"]))
        for trim in (record.get("trimHistory") or [])
    )

    return JournalEntry(
        ticker=str(record.get("ticker") or "").strip(),
        entry_price=float(record.get("entry") or 0.0),
        stop_price=float(record.get("stop") or 0.0),
        shares=float(record.get("shares") or 0.0),
        timestamp=parse_timestamp(record["timestamp"]),
        status=status,
        close_date=parse_timestamp(close_date) if close_date else None,
        total_realized_pnl=_optional_float(realized),
        trim_history=trims,
        remaining_shares=_optional_float(record.get("remainingShares")),
        position_size=_optional_float(record.get("positionSize")),
    )


def parse_cash_flow(record: dict) -> CashFlowTransaction:
    """Convert one exported cash-flow record.

    Raises:
        ValueError: If the record is malformed
    """
    if "timestamp" not in record:
        raise ValueError("cash-flow transaction requires a timestamp")
    return CashFlowTransaction(
        timestamp=parse_timestamp(record["timestamp"]),
        type=record.get("type", ""),
        amount=float(record.get("amount", 0.0)),
    )


class JournalRepository(Repository[tuple[JournalEntry, ...]]):
    """Repository for trade journal entries.

    Loads data from data/journal.json. The file holds either a bare list of
    entries or an object with an "entries" list.

    Example:
        >>> repo = JournalRepository()
        >>> entries = repo.get_all()
        >>> tickers = repo.list_tickers()
    """

    def __init__(self, paths: DataPaths = DEFAULT_PATHS):
        self._paths = paths
        self._cache: tuple[JournalEntry, ...] | None = None

    def get_all(self) -> tuple[JournalEntry, ...]:
        """Load all journal entries in file order.

        Returns:
            Immutable snapshot of entries

        Raises:
            RepositoryError: If the file cannot be read or a record is invalid
        """
        if self._cache is not None:
            return self._cache

        path = self._paths.journal
        data = read_json(path, "Journal")
        records = data.get("entries", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise RepositoryError("Journal must contain a list of entries", str(path))

        entries = []
        skipped = 0
        for idx, record in enumerate(records):
            try:
                entry = parse_entry(record)
            except (KeyError, TypeError, ValueError) as e:
                raise RepositoryError(f"Invalid journal entry #{idx}: {e}", str(path))
            if entry is None:
                skipped += 1
                continue
            entries.append(entry)

        if skipped:
            logger.warning("Skipped %d journal entries without a timestamp", skipped)
        logger.debug("Loaded %d journal entries from %s", len(entries), path)

        self._cache = tuple(entries)
        return self._cache

    def list_tickers(self) -> list[str]:
        """Get sorted list of every ticker in the journal."""
        return sorted({e.ticker for e in self.get_all()})

    def get_open(self) -> list[JournalEntry]:
        """Entries still holding shares (open or trimmed)."""
        return [e for e in self.get_all() if e.is_holding]

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._cache = None


class CashFlowRepository(Repository[tuple[CashFlowTransaction, ...]]):
    """Repository for deposits and withdrawals.

    Loads data from data/cash_flow.json ({"transactions": [...]} or a bare
    list). A missing file means no cash flow.
    """

    def __init__(self, paths: DataPaths = DEFAULT_PATHS):
        self._paths = paths
        self._cache: tuple[CashFlowTransaction, ...] | None = None

    def get_all(self) -> tuple[CashFlowTransaction, ...]:
        """Load all cash-flow transactions in file order.

        Raises:
            RepositoryError: If the file exists but cannot be parsed
        """
        if self._cache is not None:
            return self._cache

        path = self._paths.cash_flow
        if not path.exists():
            self._cache = ()
            return self._cache

        data = read_json(path, "Cash flow")
        records = data.get("transactions", []) if isinstance(data, dict) else data
        if not isinstance(records, list):
            raise RepositoryError("Cash flow must contain a list of transactions", str(path))

        transactions = []
        for idx, record in enumerate(records):
            try:
                transactions.append(parse_cash_flow(record))
            except (TypeError, ValueError) as e:
                raise RepositoryError(f"Invalid cash-flow transaction #{idx}: {e}", str(path))

        self._cache = tuple(transactions)
        return self._cache

    def get_net(self) -> float:
        """All-time signed cash flow."""
        return sum(tx.signed_amount for tx in self.get_all())

    def clear_cache(self) -> None:
        """Clear cached data."""
        self._cache = None
