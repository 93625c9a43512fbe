from dataclasses import replace
from typing import Optional

from services.store_interface import WorkdayEvent, WorkdayRecord, WorkdayStore, pick_open


class MemoryWorkdayStore(WorkdayStore):
    """メモリ上の勤務記録ストア（テスト・一時利用向け）"""

    def __init__(self, records: list[WorkdayRecord] = None):
        self._records: dict[str, WorkdayRecord] = {}
        self._events: list[WorkdayEvent] = []
        for record in records or []:
            self._records[record.id] = record

    def get_for_date(self, user_id: str, work_date: str) -> Optional[WorkdayRecord]:
        for record in self._records.values():
            if record.user_id == user_id and record.work_date == work_date:
                return replace(record)
        return None

    def get_open(self, user_id: str) -> Optional[WorkdayRecord]:
        record = pick_open(self._records.values(), user_id)
        return replace(record) if record else None

    def get(self, workday_id: str) -> Optional[WorkdayRecord]:
        record = self._records.get(workday_id)
        return replace(record) if record else None

    def insert(self, record: WorkdayRecord) -> WorkdayRecord:
        self._records[record.id] = replace(record)
        return replace(record)

    def update(self, workday_id: str, values: dict) -> WorkdayRecord:
        if workday_id not in self._records:
            raise KeyError(workday_id)
        updated = replace(self._records[workday_id], **values)
        self._records[workday_id] = updated
        return replace(updated)

    def add_event(self, event: WorkdayEvent) -> WorkdayEvent:
        self._events.append(event)
        return event

    def list_events(self, workday_id: str) -> list[WorkdayEvent]:
        events = [e for e in self._events if e.workday_id == workday_id]
        return sorted(events, key=lambda e: e.timestamp)

    def list_between(self, user_id: str, start: str, end: str) -> list[WorkdayRecord]:
        matched = [
            replace(r)
            for r in self._records.values()
            if r.user_id == user_id and start <= r.work_date <= end
        ]
        return sorted(matched, key=lambda r: r.work_date)
