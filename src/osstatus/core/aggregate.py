"""Status Aggregator - Count resources by status."""
from __future__ import annotations

from collections import Counter
from typing import Iterable

from osstatus.core.schema import ResourceRecord, StatusSnapshot


def aggregate(records: Iterable[ResourceRecord]) -> StatusSnapshot:
    """
    Count records per status.

    An unset status is counted under the empty string rather than dropped,
    so resources the provider reports without a status stay visible.

    Args:
        records: Resource records for a single kind

    Returns:
        Mapping of status -> count
    """
    counter: Counter[str] = Counter()
    for record in records:
        counter[record.status or ""] += 1
    return dict(counter)
