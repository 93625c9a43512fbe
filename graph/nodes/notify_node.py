from engine.formatters import format_hms
from engine.snapshot import parse_timestamp
from graph.state import WorkdayState


MESSAGES = {
    "start": "✅ 勤務を開始しました（{time}）",
    "pause": "☕ 休憩に入りました（勤務 {worked}）",
    "resume": "▶️ 勤務を再開しました（休憩 {pause}）",
    "finish": "🏁 勤務を終了しました（勤務 {worked} / 休憩 {pause}）",
}


def notify_node(state: WorkdayState, notifier=None) -> dict:
    """操作結果を通知するノード"""
    action = state["action_taken"]

    if action == "error":
        notifier.send_error(state["error_message"])
        return {}

    template = MESSAGES.get(action)
    if template is None:
        return {}

    msg = template.format(
        time=parse_timestamp(state["now"]).astimezone().strftime("%H:%M"),
        worked=format_hms(state["worked_seconds"]),
        pause=format_hms(state["pause_seconds"]),
    )
    notifier.send(msg)
    return {}
