# schedulers/scheduler.py
from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from engine.duration import compute_pause_seconds, compute_worked_seconds
from engine.formatters import format_hms
from engine.snapshot import WorkdaySnapshot, WorkdayStatus, derive_status


class WorkdayTicker:
    """APSchedulerによる経過時間の定期更新"""

    def __init__(self, interval_seconds: int, job_func: Callable):
        self._interval = interval_seconds
        self._job_func = job_func
        self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            self._job_func,
            trigger=IntervalTrigger(seconds=self._interval),
            id="workday_tick",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
        )

    def start(self):
        """スケジューラ開始"""
        self._scheduler.start()

    def stop(self):
        """スケジューラ停止"""
        self._scheduler.shutdown(wait=False)


def tick_should_continue(status: str) -> bool:
    """勤務中・休憩中のみ更新を続ける"""
    return status in (WorkdayStatus.ACTIVE, WorkdayStatus.PAUSED)


def make_tick_job(
    load_record: Callable[[], Optional[object]],
    render: Callable[[int, str], None],
    clock: Callable[[], datetime],
    notifier=None,
    pause_alert_minutes: int = 120,
) -> Callable[[], str]:
    """1回分の更新処理を返す

    毎回記録を読み直して計算するため、前回の結果は保持しない。
    長時間休憩の通知だけは同じ休憩に対して1回に抑える。
    """
    alerted = {"paused_at": None}

    def job() -> str:
        snapshot = WorkdaySnapshot.from_record(load_record(), clock())
        status = derive_status(snapshot)
        render(compute_worked_seconds(snapshot), status)

        if status == WorkdayStatus.PAUSED and notifier is not None:
            pause = compute_pause_seconds(snapshot.paused_at, None, snapshot.now)
            if pause >= pause_alert_minutes * 60 and alerted["paused_at"] != snapshot.paused_at:
                notifier.send(f"⏰ 休憩が{format_hms(pause)}続いています")
                alerted["paused_at"] = snapshot.paused_at

        return status

    return job
