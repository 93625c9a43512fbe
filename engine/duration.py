# engine/duration.py
import math
from datetime import datetime
from typing import Optional

from engine.snapshot import WorkdaySnapshot


def _floor_seconds(later: datetime, earlier: datetime) -> int:
    """2時刻の差を秒単位で切り捨てる（負の値もそのまま返す）"""
    return math.floor((later - earlier).total_seconds())


def compute_pause_seconds(
    paused_at: Optional[datetime],
    resumed_at: Optional[datetime],
    now: datetime,
) -> int:
    """休憩時間（秒）を返す。休憩中ならnowまでの経過を数える"""
    if paused_at is None:
        return 0

    pause_end = resumed_at if resumed_at is not None else now
    return max(0, _floor_seconds(pause_end, paused_at))


def compute_worked_seconds(snapshot: WorkdaySnapshot) -> int:
    """勤務時間（秒）を計算する

    終了済みならended_atを終端、未終了ならnowを終端とする。
    休憩中は休憩開始時点で勤務時間を止め、休憩明けなら休憩区間を差し引く。
    不整合なタイムスタンプでも例外は出さず、0未満は0に丸める。
    """
    started_at = snapshot.started_at
    if started_at is None:
        return 0

    end_boundary = snapshot.ended_at if snapshot.ended_at is not None else snapshot.now
    gross = _floor_seconds(end_boundary, started_at)

    paused_at = snapshot.paused_at
    resumed_at = snapshot.resumed_at

    # 休憩中: 休憩開始までの時間で固定
    if paused_at is not None and resumed_at is None:
        return max(0, _floor_seconds(paused_at, started_at))

    pause = 0
    if paused_at is not None and resumed_at is not None:
        pause = _floor_seconds(resumed_at, paused_at)

    return max(0, gross - pause)
