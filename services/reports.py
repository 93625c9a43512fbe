# services/reports.py
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from engine.duration import compute_pause_seconds, compute_worked_seconds
from engine.snapshot import WorkdaySnapshot, WorkdayStatus, derive_status
from services.store_interface import WorkdayRecord


@dataclass
class ReportSummary:
    today_seconds: int
    week_seconds: int
    month_seconds: int
    daily_average_seconds: int
    days_worked: int


def week_bounds(today: date) -> tuple[date, date]:
    """todayを含む週（月曜〜日曜）"""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def month_bounds(today: date) -> tuple[date, date]:
    """todayを含む月の初日と末日"""
    first = today.replace(day=1)
    next_month = (first + timedelta(days=32)).replace(day=1)
    return first, next_month - timedelta(days=1)


def daily_seconds(record: WorkdayRecord, now: datetime) -> int:
    """終了済みは保存値、それ以外は現在時刻で計算した勤務秒数"""
    if record.status == WorkdayStatus.FINISHED:
        return record.worked_seconds
    return compute_worked_seconds(WorkdaySnapshot.from_record(record, now))


def _in_range(record: WorkdayRecord, start: date, end: date) -> bool:
    return start.isoformat() <= record.work_date <= end.isoformat()


def summarize(records: Iterable[WorkdayRecord], today: date, now: datetime) -> ReportSummary:
    """今日・今週・今月の合計と1日平均を集計する"""
    records = list(records)
    week_start, week_end = week_bounds(today)
    month_start, month_end = month_bounds(today)

    today_seconds = 0
    week_seconds = 0
    month_seconds = 0
    days_worked = 0

    for record in records:
        seconds = daily_seconds(record, now)
        if record.work_date == today.isoformat():
            today_seconds += seconds
        if _in_range(record, week_start, week_end):
            week_seconds += seconds
        if _in_range(record, month_start, month_end):
            month_seconds += seconds
            if record.status == WorkdayStatus.FINISHED:
                days_worked += 1

    average = month_seconds // days_worked if days_worked > 0 else 0

    return ReportSummary(
        today_seconds=today_seconds,
        week_seconds=week_seconds,
        month_seconds=month_seconds,
        daily_average_seconds=average,
        days_worked=days_worked,
    )


def weekly_series(records: Iterable[WorkdayRecord], today: date, now: datetime) -> list[tuple[date, int]]:
    """月曜〜日曜の日別勤務秒数（記録のない日は0）"""
    by_date = {r.work_date: daily_seconds(r, now) for r in records}
    week_start, _ = week_bounds(today)
    days = [week_start + timedelta(days=i) for i in range(7)]
    return [(d, by_date.get(d.isoformat(), 0)) for d in days]


def progress_ratio(seconds: int, standard_seconds: int = 8 * 3600) -> float:
    """標準勤務時間に対する達成率（最大1.0）"""
    if standard_seconds <= 0:
        return 0.0
    return min(1.0, max(0, seconds) / standard_seconds)


@dataclass
class HistoryRow:
    work_date: str
    status: str
    worked_seconds: int
    pause_seconds: int
    notes: Optional[str]


def is_valid_date_range(start: date, end: date) -> bool:
    return start <= end


def history_rows(records: Iterable[WorkdayRecord], now: datetime) -> list[HistoryRow]:
    """勤務履歴を新しい日付順に並べる"""
    rows = []
    for record in records:
        snapshot = WorkdaySnapshot.from_record(record, now)
        rows.append(
            HistoryRow(
                work_date=record.work_date,
                status=derive_status(snapshot),
                worked_seconds=daily_seconds(record, now),
                pause_seconds=compute_pause_seconds(
                    snapshot.paused_at, snapshot.resumed_at, snapshot.now
                ),
                notes=record.notes,
            )
        )
    return sorted(rows, key=lambda r: r.work_date, reverse=True)
