# graph/nodes/duration_node.py
from engine.duration import compute_pause_seconds, compute_worked_seconds
from engine.snapshot import WorkdaySnapshot, derive_status
from graph.state import WorkdayState


def duration_node(state: WorkdayState) -> dict:
    """勤務記録から勤務秒数・休憩秒数を計算するノード"""
    snapshot = WorkdaySnapshot.from_record(state["record"], state["now"])

    return {
        "status": derive_status(snapshot),
        "worked_seconds": compute_worked_seconds(snapshot),
        "pause_seconds": compute_pause_seconds(
            snapshot.paused_at, snapshot.resumed_at, snapshot.now
        ),
    }
