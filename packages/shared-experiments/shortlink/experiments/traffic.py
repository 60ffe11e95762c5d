"""Traffic allocation - validate splits and bucket sessions into variants."""

from __future__ import annotations

from collections.abc import Sequence
from hashlib import sha256

from shortlink.experiments.exceptions import TrafficAllocationError
from shortlink.experiments.schema import VariantAllocation

BUCKETS = 100


def validate_traffic_allocation(allocations: Sequence[VariantAllocation]) -> None:
    """
    Check that allocations are non-negative and sum to 100%.

    Raises:
        TrafficAllocationError: If the split is invalid
    """
    if not allocations:
        raise TrafficAllocationError("at least one variant is required")

    negative = [a.name for a in allocations if a.traffic_allocation < 0]
    if negative:
        raise TrafficAllocationError(f"negative traffic allocation: {', '.join(negative)}")

    total = sum(a.traffic_allocation for a in allocations)
    if total != BUCKETS:
        raise TrafficAllocationError(f"traffic allocation must sum to 100%, got {total}%")


def session_bucket(session_id: str) -> int:
    """Stable bucket in [0, 100) for a session."""
    digest = sha256(session_id.encode("utf-8")).digest()
    return int.from_bytes(digest[:8], "big") % BUCKETS


def assign_variant(
    session_id: str,
    allocations: Sequence[VariantAllocation],
) -> VariantAllocation:
    """
    Assign a session to a variant.

    The same session always lands in the same variant for a given split.

    Raises:
        TrafficAllocationError: If the split is invalid
    """
    validate_traffic_allocation(allocations)

    bucket = session_bucket(session_id)
    upper = 0
    for allocation in allocations:
        upper += allocation.traffic_allocation
        if bucket < upper:
            return allocation

    # Unreachable once allocations sum to 100
    raise TrafficAllocationError(f"bucket {bucket} not covered by allocation")
