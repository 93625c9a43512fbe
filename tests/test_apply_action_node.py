# tests/test_apply_action_node.py
from unittest.mock import MagicMock, patch

from graph.nodes.apply_action_node import apply_action_node
from services.memory_store import MemoryWorkdayStore
from services.store_interface import WorkdayRecord


def _make_state(**overrides):
    base = {
        "user_id": "u1",
        "today": "2026-02-22",
        "now": "2026-02-22T09:00:00+00:00",
        "requested_action": "start",
        "record": None,
        "status": "not_started",
        "action_taken": "start",
        "error_message": None,
        "worked_seconds": 0,
        "pause_seconds": 0,
        "extra": {},
    }
    base.update(overrides)
    return base


def _stored(store, **overrides):
    values = dict(
        id="w1",
        user_id="u1",
        work_date="2026-02-22",
        started_at="2026-02-22T09:00:00+00:00",
        status="active",
    )
    values.update(overrides)
    return store.insert(WorkdayRecord(**values)).to_dict()


def test_start_inserts_record():
    """開始で記録とイベントが作られること"""
    store = MemoryWorkdayStore()
    with patch("graph.nodes.apply_action_node._new_id", side_effect=["w1", "e1"]):
        result = apply_action_node(_make_state(), workday_store=store)

    assert result["record"]["id"] == "w1"
    assert result["record"]["started_at"] == "2026-02-22T09:00:00+00:00"
    assert result["status"] == "active"
    assert store.get_for_date("u1", "2026-02-22") is not None
    assert [e.event_type for e in store.list_events("w1")] == ["start"]


def test_pause_sets_paused_at():
    store = MemoryWorkdayStore()
    record = _stored(store)
    state = _make_state(action_taken="pause", record=record, now="2026-02-22T12:00:00+00:00")
    result = apply_action_node(state, workday_store=store)

    assert result["record"]["paused_at"] == "2026-02-22T12:00:00+00:00"
    assert result["status"] == "paused"


def test_resume_stores_pause_seconds():
    store = MemoryWorkdayStore()
    record = _stored(store, paused_at="2026-02-22T12:00:00+00:00", status="paused")
    state = _make_state(action_taken="resume", record=record, now="2026-02-22T12:45:00+00:00")
    result = apply_action_node(state, workday_store=store)

    assert result["record"]["resumed_at"] == "2026-02-22T12:45:00+00:00"
    assert result["record"]["pause_seconds"] == 45 * 60
    assert result["status"] == "active"


def test_finish_stores_worked_seconds():
    """終了時に勤務秒数・休憩秒数が保存されること"""
    store = MemoryWorkdayStore()
    record = _stored(
        store,
        paused_at="2026-02-22T12:00:00+00:00",
        resumed_at="2026-02-22T13:00:00+00:00",
    )
    state = _make_state(action_taken="finish", record=record, now="2026-02-22T18:00:00+00:00")
    result = apply_action_node(state, workday_store=store)

    saved = store.get("w1")
    assert saved.ended_at == "2026-02-22T18:00:00+00:00"
    assert saved.worked_seconds == 8 * 3600
    assert saved.pause_seconds == 3600
    assert result["status"] == "finished"


def test_finish_while_paused_closes_pause():
    """休憩中の終了は同時刻で休憩を閉じること"""
    store = MemoryWorkdayStore()
    record = _stored(store, paused_at="2026-02-22T12:00:00+00:00", status="paused")
    state = _make_state(action_taken="finish", record=record, now="2026-02-22T12:30:00+00:00")
    apply_action_node(state, workday_store=store)

    saved = store.get("w1")
    assert saved.resumed_at == "2026-02-22T12:30:00+00:00"
    assert saved.worked_seconds == 3 * 3600
    assert saved.pause_seconds == 30 * 60


def test_store_failure_becomes_error():
    """保存失敗はエラー状態として返すこと"""
    store = MagicMock()
    store.update.side_effect = KeyError("w1")
    state = _make_state(
        action_taken="pause",
        record={"id": "w1", "started_at": "2026-02-22T09:00:00+00:00"},
    )
    result = apply_action_node(state, workday_store=store)

    assert result["action_taken"] == "error"
    assert "w1" in result["error_message"]
    store.add_event.assert_not_called()


def test_finish_stores_notes():
    store = MemoryWorkdayStore()
    record = _stored(store)
    state = _make_state(
        action_taken="finish",
        record=record,
        now="2026-02-22T18:00:00+00:00",
        extra={"notes": "早退なし"},
    )
    apply_action_node(state, workday_store=store)
    assert store.get("w1").notes == "早退なし"
