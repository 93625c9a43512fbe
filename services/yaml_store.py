import os
import tempfile
import threading
from pathlib import Path
from typing import Optional

import yaml

from services.store_interface import WorkdayEvent, WorkdayRecord, WorkdayStore, pick_open


class YamlWorkdayStore(WorkdayStore):
    """YAMLファイルに勤務記録を保存するストア"""

    def __init__(self, path: str = "workdays.yaml"):
        self._path = Path(path)
        self._lock = threading.RLock()

    def _load(self) -> dict:
        with self._lock:
            if not self._path.exists():
                return {"workdays": [], "events": []}
            with open(self._path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        data.setdefault("workdays", [])
        data.setdefault("events", [])
        return data

    def _save(self, data: dict):
        """一時ファイルに書いてから置き換える（読み込み側が途中の内容を見ない）"""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                yaml.safe_dump(data, f, allow_unicode=True, sort_keys=False)
            os.replace(tmp_path, self._path)
        except BaseException:
            os.unlink(tmp_path)
            raise

    def _records(self) -> list[WorkdayRecord]:
        return [WorkdayRecord.from_dict(d) for d in self._load()["workdays"]]

    def get_for_date(self, user_id: str, work_date: str) -> Optional[WorkdayRecord]:
        for record in self._records():
            if record.user_id == user_id and record.work_date == work_date:
                return record
        return None

    def get_open(self, user_id: str) -> Optional[WorkdayRecord]:
        return pick_open(self._records(), user_id)

    def get(self, workday_id: str) -> Optional[WorkdayRecord]:
        for record in self._records():
            if record.id == workday_id:
                return record
        return None

    def insert(self, record: WorkdayRecord) -> WorkdayRecord:
        with self._lock:
            data = self._load()
            data["workdays"].append(record.to_dict())
            self._save(data)
        return record

    def update(self, workday_id: str, values: dict) -> WorkdayRecord:
        with self._lock:
            data = self._load()
            for row in data["workdays"]:
                if row.get("id") == workday_id:
                    row.update(values)
                    self._save(data)
                    return WorkdayRecord.from_dict(row)
        raise KeyError(workday_id)

    def add_event(self, event: WorkdayEvent) -> WorkdayEvent:
        with self._lock:
            data = self._load()
            data["events"].append(event.to_dict())
            self._save(data)
        return event

    def list_events(self, workday_id: str) -> list[WorkdayEvent]:
        events = [
            WorkdayEvent.from_dict(d)
            for d in self._load()["events"]
            if d.get("workday_id") == workday_id
        ]
        return sorted(events, key=lambda e: e.timestamp)

    def list_between(self, user_id: str, start: str, end: str) -> list[WorkdayRecord]:
        matched = [
            r for r in self._records()
            if r.user_id == user_id and start <= r.work_date <= end
        ]
        return sorted(matched, key=lambda r: r.work_date)
