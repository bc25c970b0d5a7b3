# =============================================================================
# tests/test_stats.py - Dashboard Counter Tests
# =============================================================================
# Every per-status breakdown must add up to its total.
# =============================================================================

from datetime import datetime, timezone

from core.stats import (
    beneficiary_stats,
    case_stats,
    count_statuses,
    housing_stats,
    inventory_stats,
    volunteer_stats,
)


class TestStatusCounts:
    def test_partitions_total(self):
        rows = [
            {"status": "ACTIVE"},
            {"status": "active"},
            {"status": "PENDING"},
            {"status": "INACTIVE"},
            {"status": None},
            {},
        ]

        counts = count_statuses(rows)

        assert counts == {"total": 6, "active": 2, "pending": 1, "inactive": 3}

    def test_beneficiary_stats_sum_to_total(self):
        rows = [{"status": s} for s in ["ACTIVE"] * 5 + ["PENDING"] * 2 + ["ARCHIVED"]]

        stats = beneficiary_stats(rows)

        assert stats.total_beneficiaries == 8
        assert (
            stats.active_beneficiaries + stats.pending_beneficiaries + stats.inactive_beneficiaries
            == stats.total_beneficiaries
        )

    def test_volunteer_stats_empty(self):
        stats = volunteer_stats([])

        assert stats.total_volunteers == 0
        assert stats.active_volunteers == 0


class TestHousingStats:
    def test_buckets(self):
        rows = [
            {"status": "ACTIVE", "total_vacancies": 10, "occupied_vacancies": 4},
            {"status": "ACTIVE", "total_vacancies": 5, "occupied_vacancies": 5},
            {"status": "ACTIVE", "total_vacancies": 0, "occupied_vacancies": 0},
            {"status": "INACTIVE", "total_vacancies": 8, "occupied_vacancies": 0},
            {"status": "ARCHIVED", "total_vacancies": 2, "occupied_vacancies": 1},
        ]

        stats = housing_stats(rows)

        assert stats.available_housing == 1
        assert stats.occupied_housing == 2
        assert stats.maintenance_housing == 1
        assert stats.archived_housing == 1
        assert (
            stats.available_housing + stats.occupied_housing
            + stats.maintenance_housing + stats.archived_housing
            == stats.total_housing
        )
        assert stats.total_capacity == 25
        assert stats.total_occupied == 10


class TestInventoryStats:
    def test_threshold_boundaries(self):
        rows = [
            {"total_in_storage": 0},
            {"total_in_storage": -3},
            {"total_in_storage": 1},
            {"total_in_storage": 10},
            {"total_in_storage": 11},
        ]

        stats = inventory_stats(rows, low_stock_threshold=10)

        assert stats.out_of_stock_products == 2
        assert stats.low_stock_products == 2
        assert stats.in_stock_products == 1
        assert stats.total_quantity == 22
        assert (
            stats.in_stock_products + stats.low_stock_products + stats.out_of_stock_products
            == stats.total_products
        )


class TestCaseStats:
    NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)

    def test_status_counts_sum_to_total(self):
        rows = [
            {"status": "PENDING"},
            {"status": "IN_PROGRESS"},
            {"status": "CLOSED"},
            {"status": "CANCELLED"},
            {"status": "ESCALATED"},
            {"status": None},
        ]

        stats = case_stats(rows, now=self.NOW)

        assert sum(stats.status_counts.values()) == stats.total_cases == 6
        assert stats.status_counts["ESCALATED"] == 1
        assert stats.status_counts["PENDING"] == 2
        assert stats.status_counts["ON_HOLD"] == 0
        assert stats.open_cases == 4
        assert stats.in_progress_cases == 1

    def test_overdue_only_for_open_cases(self):
        rows = [
            {"status": "PENDING", "due_date": "2024-03-01"},
            {"status": "PENDING", "due_date": "2024-04-01"},
            {"status": "CLOSED", "due_date": "2024-03-01"},
        ]

        stats = case_stats(rows, now=self.NOW)

        assert stats.overdue_cases == 1

    def test_closed_this_month_and_resolution_time(self):
        rows = [
            {
                "status": "CLOSED",
                "created_at": "2024-03-01T12:00:00+00:00",
                "updated_at": "2024-03-05T12:00:00+00:00",
            },
            {
                "status": "CLOSED",
                "created_at": "2024-01-01T00:00:00Z",
                "updated_at": "2024-01-03T00:00:00Z",
            },
        ]

        stats = case_stats(rows, now=self.NOW)

        assert stats.closed_this_month == 1
        assert stats.avg_resolution_days == 3.0
