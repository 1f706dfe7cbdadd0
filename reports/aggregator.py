"""
REPORTS App - Report Aggregator

Builds the transient AggregatedReport behind the dashboard table, the
downloads and the e-mailed reports. Recomputed on every request.
"""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Tuple, Union

from django.db import DatabaseError
from django.utils import timezone

from parcels.models import ParcelEntry
from .date_ranges import DateRange, resolve_range
from .exceptions import ReportStorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AggregatedReport:
    """
    Parcel entries of a date range plus their totals.

    entries are ordered by date desc, then creation time desc.
    total_earnings is the exact sum of the stored earnings: nothing is
    recomputed from courier/quantity here.
    """
    entries: Tuple[ParcelEntry, ...]
    total_earnings: Decimal
    total_quantity: int
    date_range: DateRange
    filter_token: str = ''
    generated_at: datetime = field(default_factory=timezone.now)

    @property
    def is_empty(self) -> bool:
        return not self.entries

    @property
    def label(self) -> str:
        """Token used in titles and file names ('all' when unfiltered)."""
        return self.filter_token or 'all'

    def to_dict(self) -> dict:
        from parcels.serializers import ParcelEntrySerializer

        return {
            'filter': self.label,
            **self.date_range.to_dict(),
            'entries': ParcelEntrySerializer(self.entries, many=True).data,
            'totalEarnings': self.total_earnings,
            'totalQuantity': self.total_quantity,
            'generatedAt': self.generated_at.isoformat(),
        }


def aggregate(date_range: DateRange, filter_token: str = '') -> AggregatedReport:
    """
    Read the entries of a date range and total them.

    Args:
        date_range: Inclusive range (unbounded sides are not filtered)
        filter_token: Original token, kept for titles and file names

    Returns:
        AggregatedReport (possibly empty, with zero totals)

    Raises:
        ReportStorageError: If the store cannot be read
    """
    try:
        entries = tuple(
            ParcelEntry.objects.in_range(date_range).select_related('user')
        )
    except DatabaseError as e:
        logger.error(f"[REPORTS] Failed to read parcel entries for {date_range}: {e}")
        raise ReportStorageError("Unable to read parcel entries") from e

    total_earnings = sum((entry.total_earning for entry in entries), Decimal('0.00'))
    total_quantity = sum(entry.quantity for entry in entries)

    logger.info(
        f"[REPORTS] Aggregated {len(entries)} entries | "
        f"filter={filter_token or 'all'} | "
        f"parcels={total_quantity} | earnings=₱{total_earnings}"
    )

    return AggregatedReport(
        entries=entries,
        total_earnings=total_earnings,
        total_quantity=total_quantity,
        date_range=date_range,
        filter_token=filter_token or '',
    )


def build_report(token: Optional[str], now: Union[date, datetime, None] = None) -> AggregatedReport:
    """Resolve a filter token against the current date and aggregate."""
    token = (token or '').strip().lower()
    return aggregate(resolve_range(token, now), filter_token=token)
