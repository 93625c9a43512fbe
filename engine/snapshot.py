# engine/snapshot.py
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Optional, Union

TIMESTAMP_FIELDS = ("started_at", "paused_at", "resumed_at", "ended_at")


class WorkdayStatus:
    NOT_STARTED = "not_started"
    ACTIVE = "active"
    PAUSED = "paused"
    FINISHED = "finished"


def parse_timestamp(value: Union[str, datetime, None]) -> Optional[datetime]:
    """ISO-8601文字列をdatetimeに変換する。タイムゾーンなしはUTCとみなす"""
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    else:
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


@dataclass(frozen=True)
class WorkdaySnapshot:
    """計算時点での勤務記録の読み取り専用ビュー"""
    now: datetime
    started_at: Optional[datetime] = None
    paused_at: Optional[datetime] = None
    resumed_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    def __post_init__(self):
        # naive/aware混在で引き算できなくならないよう全項目をUTC基準に揃える
        for name in ("now",) + TIMESTAMP_FIELDS:
            object.__setattr__(self, name, parse_timestamp(getattr(self, name)))

    @classmethod
    def from_record(cls, record: Any, now: Union[str, datetime]) -> "WorkdaySnapshot":
        """保存済みレコード（dictまたはWorkdayRecord）からスナップショットを作る"""
        if record is None:
            return cls(now=parse_timestamp(now))

        if isinstance(record, dict):
            raw = {name: record.get(name) for name in TIMESTAMP_FIELDS}
        else:
            raw = {name: getattr(record, name, None) for name in TIMESTAMP_FIELDS}

        return cls(
            now=parse_timestamp(now),
            **{name: parse_timestamp(value) for name, value in raw.items()},
        )

    @property
    def is_paused(self) -> bool:
        return self.paused_at is not None and self.resumed_at is None


def derive_status(snapshot: WorkdaySnapshot) -> str:
    """タイムスタンプから勤務状態を判定する"""
    if snapshot.started_at is None:
        return WorkdayStatus.NOT_STARTED
    if snapshot.ended_at is not None:
        return WorkdayStatus.FINISHED
    if snapshot.is_paused:
        return WorkdayStatus.PAUSED
    return WorkdayStatus.ACTIVE
