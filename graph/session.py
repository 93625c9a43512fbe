# graph/session.py
from datetime import datetime, timezone, tzinfo
from typing import Callable, Optional

from engine.duration import compute_pause_seconds, compute_worked_seconds
from engine.snapshot import WorkdaySnapshot, derive_status
from graph.graph import build_graph
from graph.state import WorkdayState
from services.store_interface import WorkdayStore


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class WorkdaySession:
    """1ユーザーの当日勤務を操作するコントローラ

    各操作は対象の記録を読み直してからグラフを1回実行する。
    対象は未終了の勤務があればそれ（日付をまたいでいても）、
    なければ現地日付の勤務記録。
    """

    def __init__(
        self,
        workday_store: WorkdayStore,
        notifier,
        user_id: str,
        clock: Optional[Callable[[], datetime]] = None,
        tz: Optional[tzinfo] = None,
    ):
        self._store = workday_store
        self._notifier = notifier
        self._user_id = user_id
        self._clock = clock or _utc_now
        self._tz = tz  # Noneならローカルタイムゾーン
        self._graph = build_graph(workday_store=workday_store, notifier=notifier)

    def _now(self) -> datetime:
        return self._clock().astimezone(timezone.utc)

    def work_date(self, now: datetime) -> str:
        """勤務日（現地日付）"""
        return now.astimezone(self._tz).date().isoformat()

    def _load_current(self, now: datetime) -> Optional[dict]:
        record = self._store.get_open(self._user_id)
        if record is None:
            record = self._store.get_for_date(self._user_id, self.work_date(now))
        return record.to_dict() if record else None

    def _initial_state(self, action: str, extra: dict = None) -> WorkdayState:
        now = self._now()
        return {
            "user_id": self._user_id,
            "today": self.work_date(now),
            "now": now.isoformat(),
            "requested_action": action,
            "record": self._load_current(now),
            "status": "",
            "action_taken": None,
            "error_message": None,
            "worked_seconds": 0,
            "pause_seconds": 0,
            "extra": extra or {},
        }

    def run(self, action: str, extra: dict = None) -> WorkdayState:
        """操作を実行し、最終状態を返す"""
        return self._graph.invoke(self._initial_state(action, extra))

    def start(self) -> WorkdayState:
        return self.run("start")

    def pause(self) -> WorkdayState:
        return self.run("pause")

    def resume(self) -> WorkdayState:
        return self.run("resume")

    def finish(self, notes: Optional[str] = None) -> WorkdayState:
        extra = {"notes": notes} if notes is not None else {}
        return self.run("finish", extra)

    def current(self) -> dict:
        """対象勤務の状態と経過時間（書き込みなし）"""
        now = self._now()
        record = self._load_current(now)
        snapshot = WorkdaySnapshot.from_record(record, now)
        return {
            "record": record,
            "status": derive_status(snapshot),
            "worked_seconds": compute_worked_seconds(snapshot),
            "pause_seconds": compute_pause_seconds(
                snapshot.paused_at, snapshot.resumed_at, snapshot.now
            ),
        }
