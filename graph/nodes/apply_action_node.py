# graph/nodes/apply_action_node.py
import uuid
from typing import Optional

import yaml

from engine.duration import compute_pause_seconds, compute_worked_seconds
from engine.snapshot import WorkdaySnapshot, WorkdayStatus
from graph.state import WorkdayState
from services.store_interface import WorkdayEvent, WorkdayRecord, WorkdayStore

STORE_ERRORS = (KeyError, OSError, ValueError, yaml.YAMLError)


def _new_id() -> str:
    """テスト時にモック可能なID生成"""
    return uuid.uuid4().hex


def _start(state: WorkdayState, workday_store: WorkdayStore) -> WorkdayRecord:
    now = state["now"]
    record = WorkdayRecord(
        id=_new_id(),
        user_id=state["user_id"],
        work_date=state["today"],
        started_at=now,
        status=WorkdayStatus.ACTIVE,
        created_at=now,
        updated_at=now,
    )
    return workday_store.insert(record)


def _finish_values(record: dict, now: str, notes: Optional[str] = None) -> dict:
    """終了時の更新内容。休憩中なら同時刻で休憩を閉じる"""
    values = {"ended_at": now, "status": WorkdayStatus.FINISHED, "updated_at": now}
    if record.get("paused_at") and not record.get("resumed_at"):
        values["resumed_at"] = now
    if notes is not None:
        values["notes"] = notes

    snapshot = WorkdaySnapshot.from_record({**record, **values}, now)
    values["worked_seconds"] = compute_worked_seconds(snapshot)
    values["pause_seconds"] = compute_pause_seconds(
        snapshot.paused_at, snapshot.resumed_at, snapshot.now
    )
    return values


def _update_values(action: str, record: dict, now: str, extra: dict) -> dict:
    if action == "pause":
        return {"paused_at": now, "status": WorkdayStatus.PAUSED, "updated_at": now}

    if action == "resume":
        snapshot = WorkdaySnapshot.from_record(record, now)
        return {
            "resumed_at": now,
            "status": WorkdayStatus.ACTIVE,
            "pause_seconds": compute_pause_seconds(snapshot.paused_at, None, snapshot.now),
            "updated_at": now,
        }

    return _finish_values(record, now, extra.get("notes"))


def apply_action_node(state: WorkdayState, workday_store: WorkdayStore = None) -> dict:
    """許可された操作を勤務記録に書き込み、イベントを記録するノード"""
    action = state["action_taken"]
    now = state["now"]

    try:
        if action == "start":
            saved = _start(state, workday_store)
        else:
            record = state["record"]
            values = _update_values(action, record, now, state["extra"])
            saved = workday_store.update(record["id"], values)

        workday_store.add_event(
            WorkdayEvent(
                id=_new_id(),
                workday_id=saved.id,
                event_type=action,
                timestamp=now,
            )
        )
    except STORE_ERRORS as e:
        return {"action_taken": "error", "error_message": f"勤務記録の保存に失敗しました: {e}"}

    return {"record": saved.to_dict(), "status": saved.status, "error_message": None}
