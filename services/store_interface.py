from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Iterable, Optional


@dataclass
class WorkdayRecord:
    id: str
    user_id: str
    work_date: str                      # YYYY-MM-DD
    started_at: Optional[str] = None    # ISO-8601
    paused_at: Optional[str] = None
    resumed_at: Optional[str] = None
    ended_at: Optional[str] = None
    status: str = "not_started"
    worked_seconds: int = 0
    pause_seconds: int = 0
    notes: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WorkdayRecord":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class WorkdayEvent:
    id: str
    workday_id: str
    event_type: str                     # "start" / "pause" / "resume" / "finish"
    timestamp: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "WorkdayEvent":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


def pick_open(records: Iterable[WorkdayRecord], user_id: str) -> Optional[WorkdayRecord]:
    """未終了の記録のうちwork_dateが最も新しいもの"""
    open_records = [
        r for r in records
        if r.user_id == user_id and r.started_at and not r.ended_at
    ]
    if not open_records:
        return None
    return max(open_records, key=lambda r: r.work_date)


class WorkdayStore(ABC):
    """勤務記録ストレージの抽象インターフェース"""

    @abstractmethod
    def get_for_date(self, user_id: str, work_date: str) -> Optional[WorkdayRecord]:
        """指定ユーザー・指定日の勤務記録"""
        ...

    @abstractmethod
    def get_open(self, user_id: str) -> Optional[WorkdayRecord]:
        """開始済みで未終了の勤務記録（日付をまたいでいても返す）"""
        ...

    @abstractmethod
    def get(self, workday_id: str) -> Optional[WorkdayRecord]:
        ...

    @abstractmethod
    def insert(self, record: WorkdayRecord) -> WorkdayRecord:
        """新規登録"""
        ...

    @abstractmethod
    def update(self, workday_id: str, values: dict) -> WorkdayRecord:
        """部分更新（後勝ち）。存在しないIDはKeyError"""
        ...

    @abstractmethod
    def add_event(self, event: WorkdayEvent) -> WorkdayEvent:
        ...

    @abstractmethod
    def list_events(self, workday_id: str) -> list[WorkdayEvent]:
        """イベントを時刻の昇順で返す"""
        ...

    @abstractmethod
    def list_between(self, user_id: str, start: str, end: str) -> list[WorkdayRecord]:
        """work_dateがstart〜end（両端含む）の勤務記録"""
        ...
