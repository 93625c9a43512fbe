# tests/test_graph.py
from graph.graph import route_after_gate, route_after_apply, build_graph


def _make_state(**overrides):
    base = {
        "user_id": "u1",
        "today": "2026-02-22",
        "now": "2026-02-22T09:00:00+00:00",
        "requested_action": "start",
        "record": None,
        "status": "",
        "action_taken": None,
        "error_message": None,
        "worked_seconds": 0,
        "pause_seconds": 0,
        "extra": {},
    }
    base.update(overrides)
    return base


def test_route_gate_error():
    """操作不可の場合notifyへ"""
    assert route_after_gate(_make_state(action_taken="error")) == "notify"


def test_route_gate_allowed():
    assert route_after_gate(_make_state(action_taken="pause")) == "apply_action"


def test_route_apply_error():
    """保存失敗の場合notifyへ"""
    assert route_after_apply(_make_state(action_taken="error")) == "notify"


def test_route_apply_ok():
    assert route_after_apply(_make_state(action_taken="start")) == "duration"


def test_build_graph():
    """グラフが正常にビルドできること"""
    graph = build_graph()
    assert graph is not None
