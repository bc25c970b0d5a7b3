# =============================================================================
# core/stats.py - Dashboard Counters
# =============================================================================
# Pure functions that turn the rows of one organization into stats models.
# Repositories fetch the rows; everything here is computed client-side.
#
# Every set of per-status counters partitions the total: each row lands in
# exactly one bucket, so the buckets always sum to the row count.
# =============================================================================

from datetime import datetime, timezone
from typing import Any

from core.models.beneficiary import BeneficiaryStats
from core.models.case import CaseStats
from core.models.enums import CaseStatus
from core.models.housing import HousingStats
from core.models.inventory import InventoryStats
from core.models.volunteer import VolunteerStats
from lib.utils import parse_timestamp

# Statuses that end a case
FINISHED_CASE_STATUSES = {CaseStatus.CLOSED.value, CaseStatus.CANCELLED.value}

SECONDS_PER_DAY = 86400


def _count(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def _status(row: dict[str, Any]) -> str:
    return str(row.get("status") or "").upper()


def count_statuses(rows: list[dict[str, Any]]) -> dict[str, int]:
    """
    Split rows into active / pending / inactive.

    Status is matched case-insensitively; anything that is neither ACTIVE
    nor PENDING (including a missing status) counts as inactive.
    """
    counts = {"total": len(rows), "active": 0, "pending": 0, "inactive": 0}
    for row in rows:
        status = _status(row)
        if status == "ACTIVE":
            counts["active"] += 1
        elif status == "PENDING":
            counts["pending"] += 1
        else:
            counts["inactive"] += 1
    return counts


def beneficiary_stats(rows: list[dict[str, Any]]) -> BeneficiaryStats:
    counts = count_statuses(rows)
    return BeneficiaryStats(
        total_beneficiaries=counts["total"],
        active_beneficiaries=counts["active"],
        pending_beneficiaries=counts["pending"],
        inactive_beneficiaries=counts["inactive"],
    )


def volunteer_stats(rows: list[dict[str, Any]]) -> VolunteerStats:
    counts = count_statuses(rows)
    return VolunteerStats(
        total_volunteers=counts["total"],
        active_volunteers=counts["active"],
        pending_volunteers=counts["pending"],
        inactive_volunteers=counts["inactive"],
    )


def housing_stats(rows: list[dict[str, Any]]) -> HousingStats:
    """
    Occupancy summary over housing rows.

    - available: ACTIVE with free beds
    - occupied: ACTIVE and full (occupied >= capacity)
    - maintenance: INACTIVE or PENDING
    - archived: any other status
    """
    stats = HousingStats(total_housing=len(rows))

    for row in rows:
        capacity = _count(row.get("total_vacancies"))
        occupied = _count(row.get("occupied_vacancies"))
        status = _status(row)

        if status == "ACTIVE":
            if occupied < capacity:
                stats.available_housing += 1
            else:
                stats.occupied_housing += 1
        elif status in ("INACTIVE", "PENDING"):
            stats.maintenance_housing += 1
        else:
            stats.archived_housing += 1

        stats.total_capacity += capacity
        stats.total_occupied += occupied

    return stats


def inventory_stats(rows: list[dict[str, Any]], low_stock_threshold: int) -> InventoryStats:
    """
    Stock summary over product rows.

    Zero or negative stock is out of stock; 1..threshold is low stock.
    """
    stats = InventoryStats(total_products=len(rows))

    for row in rows:
        quantity = _count(row.get("total_in_storage"))
        if quantity <= 0:
            stats.out_of_stock_products += 1
        elif quantity <= low_stock_threshold:
            stats.low_stock_products += 1
        else:
            stats.in_stock_products += 1
        stats.total_quantity += max(quantity, 0)

    return stats


def case_stats(rows: list[dict[str, Any]], now: datetime | None = None) -> CaseStats:
    """
    Case counters for an organization.

    `status_counts` starts with every CaseStatus at zero and counts unknown
    statuses under their own key. Resolution time is measured from
    created_at to updated_at of closed cases.
    """
    now = now or datetime.now(timezone.utc)
    start_of_month = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

    stats = CaseStats(total_cases=len(rows))
    resolution_days: list[float] = []

    for row in rows:
        status = _status(row) or CaseStatus.PENDING.value
        stats.status_counts[status] = stats.status_counts.get(status, 0) + 1

        if status not in FINISHED_CASE_STATUSES:
            stats.open_cases += 1
            due_date = parse_timestamp(row.get("due_date"))
            if due_date and due_date < now:
                stats.overdue_cases += 1

        if status == CaseStatus.IN_PROGRESS.value:
            stats.in_progress_cases += 1

        if status == CaseStatus.CLOSED.value:
            created_at = parse_timestamp(row.get("created_at"))
            updated_at = parse_timestamp(row.get("updated_at"))
            if updated_at and updated_at >= start_of_month:
                stats.closed_this_month += 1
            if created_at and updated_at and updated_at >= created_at:
                resolution_days.append((updated_at - created_at).total_seconds() / SECONDS_PER_DAY)

    if resolution_days:
        stats.avg_resolution_days = round(sum(resolution_days) / len(resolution_days), 1)

    return stats
