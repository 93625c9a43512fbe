from typing import TypedDict, Optional


class WorkdayState(TypedDict):
    user_id: str                        # 対象ユーザー
    today: str                          # YYYY-MM-DD
    now: str                            # 評価時刻 ISO-8601
    requested_action: str               # "start" / "pause" / "resume" / "finish"
    record: Optional[dict]              # 当日の勤務記録
    status: str                         # not_started / active / paused / finished
    action_taken: Optional[str]         # 実行した操作 or "error"
    error_message: Optional[str]        # エラー詳細
    worked_seconds: int                 # 勤務秒数
    pause_seconds: int                  # 休憩秒数
    extra: dict                         # 任意の追加データ
