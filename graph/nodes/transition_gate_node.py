# graph/nodes/transition_gate_node.py
from engine.snapshot import WorkdaySnapshot, WorkdayStatus, derive_status
from graph.state import WorkdayState

ALLOWED_FROM = {
    "start": {WorkdayStatus.NOT_STARTED},
    "pause": {WorkdayStatus.ACTIVE},
    "resume": {WorkdayStatus.PAUSED},
    "finish": {WorkdayStatus.ACTIVE, WorkdayStatus.PAUSED},
}

NOTES_MAX_LENGTH = 500

REJECT_MESSAGES = {
    WorkdayStatus.NOT_STARTED: "勤務がまだ開始されていません",
    WorkdayStatus.ACTIVE: "勤務はすでに開始されています",
    WorkdayStatus.PAUSED: "休憩中です",
    WorkdayStatus.FINISHED: "本日の勤務はすでに終了しています",
}


def transition_gate_node(state: WorkdayState) -> dict:
    """現在の勤務状態から要求された操作が可能かを判定するノード"""
    action = state["requested_action"]
    record = state["record"]
    status = derive_status(WorkdaySnapshot.from_record(record, state["now"]))

    if action not in ALLOWED_FROM:
        return {
            "status": status,
            "action_taken": "error",
            "error_message": f"不明な操作です: {action}",
        }

    if status not in ALLOWED_FROM[action]:
        return {
            "status": status,
            "action_taken": "error",
            "error_message": REJECT_MESSAGES[status],
        }

    # 休憩は1日1回まで
    if action == "pause" and record.get("paused_at"):
        return {
            "status": status,
            "action_taken": "error",
            "error_message": "休憩は1日1回までです",
        }

    notes = state["extra"].get("notes")
    if notes is not None and len(notes) > NOTES_MAX_LENGTH:
        return {
            "status": status,
            "action_taken": "error",
            "error_message": f"メモは{NOTES_MAX_LENGTH}文字以内で入力してください",
        }

    return {"status": status, "action_taken": action, "error_message": None}
