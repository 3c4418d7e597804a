from __future__ import annotations

import uuid
from datetime import date

import pytest

from app.models.entities import WorkType
from app.services.evm_engine import ProjectEvmSeries
from app.services.work_type_engine import (
    RatioView,
    WorkTypeTotals,
    aggregate_by_work_type,
    forecast_ratio,
    ratio_series,
    run_rate_forecast,
    snapshot_index,
    snapshot_ratios,
)


def _project(work_type: WorkType, pv: list[float], ac: list[float], estimated: float) -> ProjectEvmSeries:
    return ProjectEvmSeries(
        project_id=uuid.uuid4(),
        project_name=f"{work_type.value} project",
        work_type=work_type,
        pv_series=tuple(pv),
        ac_series=tuple(ac),
        fixed_hours=0.0,
        estimated_hours=estimated,
    )


def _totals(work_type: WorkType, pv: list[float], ac: list[float], bac: float) -> WorkTypeTotals:
    return WorkTypeTotals(work_type=work_type, pv_daily=tuple(pv), ac_daily=tuple(ac), bac_total=bac)


def test_resolve_defaults_unknown_classification_to_active_delivery() -> None:
    assert WorkType.resolve(None) is WorkType.IN_PROGRESS
    assert WorkType.resolve("") is WorkType.IN_PROGRESS
    assert WorkType.resolve("SOMETHING_ELSE") is WorkType.IN_PROGRESS
    assert WorkType.resolve("SE_TRANSFER") is WorkType.SE_TRANSFER
    assert WorkType.resolve(WorkType.INDIRECT) is WorkType.INDIRECT


def test_aggregate_by_work_type_always_returns_three_buckets() -> None:
    types = aggregate_by_work_type(3, [])

    assert [row.work_type for row in types] == [
        WorkType.IN_PROGRESS,
        WorkType.SE_TRANSFER,
        WorkType.INDIRECT,
    ]
    for row in types:
        assert row.pv_daily == (0.0, 0.0, 0.0)
        assert row.ac_daily == (0.0, 0.0, 0.0)
        assert row.bac_total == 0.0
        assert row.label


def test_aggregate_by_work_type_sums_projects_per_bucket() -> None:
    projects = [
        _project(WorkType.IN_PROGRESS, [1, 2, 0], [0.5, 0, 1], 10),
        _project(WorkType.IN_PROGRESS, [1, 1, 1], [1, 1, 1], 5),
        _project(WorkType.INDIRECT, [0, 0, 3], [2, 0, 0], 7),
    ]

    in_progress, transfer, indirect = aggregate_by_work_type(3, projects)

    assert in_progress.pv_daily == (2.0, 3.0, 1.0)
    assert in_progress.ac_daily == (1.5, 1.0, 2.0)
    assert in_progress.bac_total == 15.0
    assert transfer.pv_daily == (0.0, 0.0, 0.0)
    assert indirect.pv_daily == (0.0, 0.0, 3.0)
    assert indirect.bac_total == 7.0


def test_ratio_partition_sums_to_one_hundred() -> None:
    types = [
        _totals(WorkType.IN_PROGRESS, [3, 1, 0, 2.5], [1, 0, 0, 1], 30),
        _totals(WorkType.SE_TRANSFER, [1, 1, 0, 0.5], [2, 0, 0, 3], 10),
        _totals(WorkType.INDIRECT, [0, 2, 0, 1], [1, 0, 0, 7], 0),
    ]

    for view in RatioView:
        series = ratio_series(types, view)
        for index in range(4):
            pv_sum = sum(row.pv_ratio[index] for row in series)
            if index == 2 and view is RatioView.DAILY:
                assert pv_sum == 0.0
            else:
                assert pv_sum == pytest.approx(100.0, abs=1e-6)
        for index in (0, 3):
            assert sum(row.ac_ratio[index] for row in series) == pytest.approx(100.0, abs=1e-6)

    daily = ratio_series(types)
    assert daily[0].pv_ratio[0] == pytest.approx(75.0)
    assert all(value == 0.0 for row in daily for value in row.ac_ratio[1:3])


def test_bac_ratio_is_constant_and_zero_without_budget() -> None:
    types = [
        _totals(WorkType.IN_PROGRESS, [1, 1], [0, 0], 30),
        _totals(WorkType.SE_TRANSFER, [1, 1], [0, 0], 10),
        _totals(WorkType.INDIRECT, [0, 0], [0, 0], 0),
    ]

    series = ratio_series(types)

    assert series[0].bac_ratio == (75.0, 75.0)
    assert series[1].bac_ratio == (25.0, 25.0)
    assert series[2].bac_ratio == (0.0, 0.0)

    no_budget = ratio_series([_totals(WorkType.IN_PROGRESS, [1], [1], 0)])
    assert no_budget[0].bac_ratio == (0.0,)


def test_cumulative_view_uses_running_totals() -> None:
    types = [
        _totals(WorkType.IN_PROGRESS, [2, 0], [1, 0], 0),
        _totals(WorkType.SE_TRANSFER, [0, 2], [0, 3], 0),
        _totals(WorkType.INDIRECT, [0, 0], [0, 0], 0),
    ]

    series = ratio_series(types, RatioView.CUMULATIVE)

    assert series[0].pv_ratio == pytest.approx((100.0, 50.0))
    assert series[1].pv_ratio == pytest.approx((0.0, 50.0))
    assert series[0].ac_ratio == pytest.approx((100.0, 25.0))


def test_run_rate_forecast_boundaries() -> None:
    assert run_rate_forecast(0.0, 1, 19) == 0.0
    assert run_rate_forecast(10.0, 1, 19) == pytest.approx(200.0)
    assert run_rate_forecast(20.0, 1, 19) == pytest.approx(400.0)
    assert run_rate_forecast(30.0, 30, 0) == pytest.approx(30.0)


def test_forecast_at_day_one_scenario() -> None:
    assert forecast_ratio(10.0, 20.0, 0, 20) == pytest.approx(50.0)
    assert forecast_ratio(0.0, 20.0, 0, 20) == 0.0
    assert forecast_ratio(0.0, 0.0, 0, 20) == 0.0


def test_forecast_ratio_series_uses_cumulative_actual_cost() -> None:
    days = 20
    in_progress_ac = [10.0] + [0.0] * (days - 1)
    transfer_ac = [10.0] + [0.0] * (days - 1)
    transfer_ac[1] = 20.0
    types = [
        _totals(WorkType.IN_PROGRESS, [0.0] * days, in_progress_ac, 0),
        _totals(WorkType.SE_TRANSFER, [0.0] * days, transfer_ac, 0),
        _totals(WorkType.INDIRECT, [0.0] * days, [0.0] * days, 0),
    ]

    series = ratio_series(types)

    assert series[0].forecast_ratio[0] == pytest.approx(50.0)
    assert series[0].forecast_ratio[1] == pytest.approx(25.0)
    assert series[1].forecast_ratio[1] == pytest.approx(75.0)
    assert series[2].forecast_ratio[5] == 0.0
    assert series[0].forecast_ratio == ratio_series(types, RatioView.CUMULATIVE)[0].forecast_ratio


def test_snapshot_index_prefers_today_within_month() -> None:
    days = ["2025-04-01", "2025-04-02", "2025-04-03"]

    assert snapshot_index(days, today=date(2025, 4, 2)) == 1
    assert snapshot_index(days, today=date(2025, 5, 2)) == 2
    assert snapshot_index([], today=date(2025, 4, 2)) == -1


def test_snapshot_ratios_use_cumulative_values_through_index() -> None:
    types = [
        _totals(WorkType.IN_PROGRESS, [2, 2, 2, 2], [1, 1, 0, 0], 30),
        _totals(WorkType.SE_TRANSFER, [2, 0, 0, 0], [1, 1, 0, 0], 10),
        _totals(WorkType.INDIRECT, [0, 0, 0, 0], [0, 0, 0, 0], 0),
    ]

    snapshot = snapshot_ratios(types, 1)

    assert snapshot[0].pv_ratio == pytest.approx(66.6666667)
    assert snapshot[0].ac_ratio == pytest.approx(50.0)
    assert snapshot[0].bac_ratio == pytest.approx(75.0)
    assert snapshot[0].forecast_ratio == pytest.approx(50.0)
    assert sum(row.pv_ratio for row in snapshot) == pytest.approx(100.0)

    out_of_range = snapshot_ratios(types, 10)
    assert all(row.pv_ratio == 0.0 and row.forecast_ratio == 0.0 for row in out_of_range)
