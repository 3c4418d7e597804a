"""Work-type rollup, ratio series and run-rate forecast."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date

from app.models.entities import WorkType
from app.services.evm_calendar import day_key
from app.services.evm_engine import DailySeries, ProjectEvmSeries, cumulative

WORK_TYPE_ORDER: tuple[WorkType, ...] = (WorkType.IN_PROGRESS, WorkType.SE_TRANSFER, WorkType.INDIRECT)


class RatioView(str, enum.Enum):
    DAILY = "daily"
    CUMULATIVE = "cumulative"


@dataclass(frozen=True, slots=True)
class WorkTypeTotals:
    work_type: WorkType
    pv_daily: DailySeries
    ac_daily: DailySeries
    bac_total: float

    @property
    def label(self) -> str:
        return self.work_type.label


@dataclass(frozen=True, slots=True)
class WorkTypeRatioSeries:
    work_type: WorkType
    pv_ratio: DailySeries
    ac_ratio: DailySeries
    bac_ratio: DailySeries
    forecast_ratio: DailySeries

    @property
    def label(self) -> str:
        return self.work_type.label


@dataclass(frozen=True, slots=True)
class WorkTypeSnapshot:
    work_type: WorkType
    pv_ratio: float
    ac_ratio: float
    bac_ratio: float
    forecast_ratio: float

    @property
    def label(self) -> str:
        return self.work_type.label


def aggregate_by_work_type(total_days: int, projects: Iterable[ProjectEvmSeries]) -> list[WorkTypeTotals]:
    """Sum project PV/AC per day and budget per bucket.

    All three buckets are always returned, zero-filled when no project maps to
    them, in ``WORK_TYPE_ORDER``.
    """

    pv: dict[WorkType, list[float]] = {work_type: [0.0] * total_days for work_type in WORK_TYPE_ORDER}
    ac: dict[WorkType, list[float]] = {work_type: [0.0] * total_days for work_type in WORK_TYPE_ORDER}
    bac: dict[WorkType, float] = {work_type: 0.0 for work_type in WORK_TYPE_ORDER}

    for project in projects:
        bucket = WorkType.resolve(project.work_type)
        for index, value in enumerate(project.pv_series):
            pv[bucket][index] += value
        for index, value in enumerate(project.ac_series):
            ac[bucket][index] += value
        bac[bucket] += project.estimated_hours

    return [
        WorkTypeTotals(
            work_type=work_type,
            pv_daily=tuple(pv[work_type]),
            ac_daily=tuple(ac[work_type]),
            bac_total=bac[work_type],
        )
        for work_type in WORK_TYPE_ORDER
    ]


def _sum_by_day(series: Iterable[Sequence[float]], total_days: int) -> DailySeries:
    totals = [0.0] * total_days
    for values in series:
        for index, value in enumerate(values):
            totals[index] += value
    return tuple(totals)


def percentage(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole > 0 else 0.0


def run_rate_forecast(current: float, elapsed_days: int, remaining_days: int) -> float:
    """Linear extrapolation of the average daily rate over the rest of the period."""

    if current == 0 or elapsed_days <= 0:
        return 0.0
    return current + (current / elapsed_days) * remaining_days


def forecast_ratio(type_cumulative: float, total_cumulative: float, index: int, total_days: int) -> float:
    """Share of the bucket in the run-rate forecast as of zero-based day ``index``."""

    elapsed = index + 1
    remaining = total_days - elapsed
    type_forecast = run_rate_forecast(type_cumulative, elapsed, remaining)
    total_forecast = run_rate_forecast(total_cumulative, elapsed, remaining)
    return percentage(type_forecast, total_forecast)


def ratio_series(
    types: Sequence[WorkTypeTotals],
    view: RatioView = RatioView.DAILY,
) -> list[WorkTypeRatioSeries]:
    """Percentage-of-total series for each bucket.

    PV and AC ratios follow ``view``; the budget ratio is constant across days
    and the forecast ratio always extrapolates cumulative AC.
    """

    total_days = len(types[0].pv_daily) if types else 0
    total_pv_daily = _sum_by_day((item.pv_daily for item in types), total_days)
    total_ac_daily = _sum_by_day((item.ac_daily for item in types), total_days)
    total_bac = sum(item.bac_total for item in types)
    cumulative_total_ac = cumulative(total_ac_daily)

    if view is RatioView.CUMULATIVE:
        total_pv = cumulative(total_pv_daily)
        total_ac = cumulative_total_ac
    else:
        total_pv = total_pv_daily
        total_ac = total_ac_daily

    output: list[WorkTypeRatioSeries] = []
    for item in types:
        if view is RatioView.CUMULATIVE:
            pv_values = cumulative(item.pv_daily)
            ac_values = cumulative(item.ac_daily)
        else:
            pv_values = item.pv_daily
            ac_values = item.ac_daily
        cumulative_ac = cumulative(item.ac_daily)
        bac_ratio = percentage(item.bac_total, total_bac)

        output.append(
            WorkTypeRatioSeries(
                work_type=item.work_type,
                pv_ratio=tuple(percentage(value, total) for value, total in zip(pv_values, total_pv)),
                ac_ratio=tuple(percentage(value, total) for value, total in zip(ac_values, total_ac)),
                bac_ratio=(bac_ratio,) * total_days,
                forecast_ratio=tuple(
                    forecast_ratio(cumulative_ac[index], cumulative_total_ac[index], index, total_days)
                    for index in range(total_days)
                ),
            )
        )
    return output


def snapshot_index(days: Sequence[str], *, today: date | None = None) -> int:
    """Day index a month summary is read at: today in the current month, else the last day."""

    if not days:
        return -1
    key = day_key(today or date.today())
    if key in days:
        return days.index(key)
    return len(days) - 1


def snapshot_ratios(types: Sequence[WorkTypeTotals], index: int) -> list[WorkTypeSnapshot]:
    """Bucket shares of cumulative PV/AC, budget and forecast as of one day."""

    total_days = len(types[0].pv_daily) if types else 0
    if index < 0 or index >= total_days:
        return [
            WorkTypeSnapshot(work_type=item.work_type, pv_ratio=0.0, ac_ratio=0.0, bac_ratio=0.0, forecast_ratio=0.0)
            for item in types
        ]

    total_pv = sum(sum(item.pv_daily[: index + 1]) for item in types)
    total_ac = sum(sum(item.ac_daily[: index + 1]) for item in types)
    total_bac = sum(item.bac_total for item in types)

    output: list[WorkTypeSnapshot] = []
    for item in types:
        type_pv = sum(item.pv_daily[: index + 1])
        type_ac = sum(item.ac_daily[: index + 1])
        output.append(
            WorkTypeSnapshot(
                work_type=item.work_type,
                pv_ratio=percentage(type_pv, total_pv),
                ac_ratio=percentage(type_ac, total_ac),
                bac_ratio=percentage(item.bac_total, total_bac),
                forecast_ratio=forecast_ratio(type_ac, total_ac, index, total_days),
            )
        )
    return output
