"""勤怠タイマー - エントリーポイント"""
import os
import signal
import threading
from datetime import date, datetime, timezone
from typing import Optional

import typer
from dotenv import load_dotenv

from engine.formatters import format_hms, format_hours_minutes
from graph.session import WorkdaySession
from schedulers.scheduler import WorkdayTicker, make_tick_job, tick_should_continue
from services.config_loader import apply_env_overrides, load_config
from services.memory_store import MemoryWorkdayStore
from services.reports import (
    history_rows,
    is_valid_date_range,
    month_bounds,
    progress_ratio,
    summarize,
    week_bounds,
    weekly_series,
)
from services.slack_client import ConsoleNotifier, SlackNotifier
from services.yaml_store import YamlWorkdayStore

app = typer.Typer(help="勤務の開始・休憩・再開・終了と経過時間の表示")

STATUS_LABELS = {
    "not_started": "未開始",
    "active": "勤務中",
    "paused": "休憩中",
    "finished": "終了",
}


def _now() -> datetime:
    return datetime.now(timezone.utc)


def create_services(config: dict):
    """設定に基づいてサービスインスタンスを生成"""
    load_dotenv()

    # 勤務記録ストア
    store_config = config["store"]
    if store_config["backend"] == "memory":
        workday_store = MemoryWorkdayStore()
    else:
        workday_store = YamlWorkdayStore(path=store_config["path"])

    # Slack通知
    slack_config = config["slack"]
    slack_token = os.getenv("SLACK_BOT_TOKEN", "")
    if slack_config["enabled"] and slack_token:
        notifier = SlackNotifier(token=slack_token, channel=slack_config["notify_channel"])
    else:
        notifier = ConsoleNotifier()

    return workday_store, notifier


def _setup(config_path: str):
    config = apply_env_overrides(load_config(config_path))
    workday_store, notifier = create_services(config)
    session = WorkdaySession(
        workday_store=workday_store,
        notifier=notifier,
        user_id=config["user"]["id"],
        clock=_now,
    )
    return config, workday_store, notifier, session


def _run_action(action: str, config_path: str, extra: dict = None):
    _, _, _, session = _setup(config_path)
    result = session.run(action, extra)
    if result["action_taken"] == "error":
        raise typer.Exit(code=1)


ConfigOption = typer.Option("config.yaml", "--config", "-c", help="設定ファイル")


@app.command()
def start(config_path: str = ConfigOption):
    """勤務開始"""
    _run_action("start", config_path)


@app.command()
def pause(config_path: str = ConfigOption):
    """休憩開始"""
    _run_action("pause", config_path)


@app.command()
def resume(config_path: str = ConfigOption):
    """勤務再開"""
    _run_action("resume", config_path)


@app.command()
def finish(
    notes: Optional[str] = typer.Option(None, "--notes", "-n", help="勤務メモ（500文字以内）"),
    config_path: str = ConfigOption,
):
    """勤務終了"""
    _run_action("finish", config_path, {"notes": notes} if notes is not None else None)


@app.command()
def status(config_path: str = ConfigOption):
    """当日の状態と経過時間を表示"""
    config, _, _, session = _setup(config_path)
    current = session.current()
    ratio = progress_ratio(current["worked_seconds"], config["workday"]["standard_seconds"])
    print(f"[勤怠タイマー] 状態: {STATUS_LABELS[current['status']]}")
    print(f"[勤怠タイマー] 勤務: {format_hms(current['worked_seconds'])} ({ratio:.0%})")
    print(f"[勤怠タイマー] 休憩: {format_hms(current['pause_seconds'])}")


@app.command()
def events(config_path: str = ConfigOption):
    """当日のイベント履歴を表示"""
    _, workday_store, _, session = _setup(config_path)
    record = session.current()["record"]
    if record is None:
        print("[勤怠タイマー] 本日の勤務記録はありません")
        return
    for event in workday_store.list_events(record["id"]):
        print(f"{event.timestamp}  {event.event_type}")


@app.command()
def report(config_path: str = ConfigOption):
    """今日・今週・今月の集計を表示"""
    config, workday_store, _, session = _setup(config_path)
    now = _now()
    today = date.fromisoformat(session.work_date(now))
    start_day = min(week_bounds(today)[0], month_bounds(today)[0])
    end_day = max(week_bounds(today)[1], month_bounds(today)[1])
    records = workday_store.list_between(
        config["user"]["id"], start_day.isoformat(), end_day.isoformat()
    )

    summary = summarize(records, today, now)
    print(f"今日      {format_hours_minutes(summary.today_seconds)}")
    print(f"今週      {format_hours_minutes(summary.week_seconds)}")
    print(f"今月      {format_hours_minutes(summary.month_seconds)}")
    print(f"1日平均   {format_hours_minutes(summary.daily_average_seconds)}")
    print(f"勤務日数  {summary.days_worked}")
    print("")
    for day, seconds in weekly_series(records, today, now):
        print(f"{day.isoformat()}  {format_hms(seconds)}")


def _parse_day(value: Optional[str], default: date) -> date:
    if value is None:
        return default
    try:
        return date.fromisoformat(value)
    except ValueError:
        print(f"[勤怠タイマー] 日付はYYYY-MM-DD形式で指定してください: {value}")
        raise typer.Exit(code=1)


@app.command()
def history(
    date_from: Optional[str] = typer.Option(None, "--from", help="開始日 YYYY-MM-DD（既定: 今月1日）"),
    date_to: Optional[str] = typer.Option(None, "--to", help="終了日 YYYY-MM-DD（既定: 今月末日）"),
    config_path: str = ConfigOption,
):
    """期間内の勤務履歴を新しい順に表示"""
    config, workday_store, _, session = _setup(config_path)
    now = _now()
    first_day, last_day = month_bounds(date.fromisoformat(session.work_date(now)))
    start_day = _parse_day(date_from, first_day)
    end_day = _parse_day(date_to, last_day)

    if not is_valid_date_range(start_day, end_day):
        print("[勤怠タイマー] 開始日は終了日以前を指定してください")
        raise typer.Exit(code=1)

    records = workday_store.list_between(
        config["user"]["id"], start_day.isoformat(), end_day.isoformat()
    )
    rows = history_rows(records, now)
    if not rows:
        print("[勤怠タイマー] 該当する勤務記録はありません")
        return

    for row in rows:
        line = (
            f"{row.work_date}  {STATUS_LABELS[row.status]}  "
            f"勤務 {format_hms(row.worked_seconds)}  休憩 {format_hms(row.pause_seconds)}"
        )
        if row.notes:
            line += f"  {row.notes}"
        print(line)


@app.command()
def watch(config_path: str = ConfigOption):
    """勤務中・休憩中の経過時間を定期表示"""
    config, _, notifier, session = _setup(config_path)
    stopped = threading.Event()

    def load_record():
        return session.current()["record"]

    def render(worked_seconds: int, status: str):
        print(f"\r{format_hms(worked_seconds)}  {STATUS_LABELS[status]}", end="", flush=True)

    tick = make_tick_job(
        load_record=load_record,
        render=render,
        clock=_now,
        notifier=notifier,
        pause_alert_minutes=config["workday"]["pause_alert_minutes"],
    )

    def tick_job():
        try:
            current_status = tick()
        except Exception as e:
            print(f"\n[勤怠タイマー] 更新中にエラー: {e}")
            notifier.send_error(str(e))
            return
        if not tick_should_continue(current_status):
            stopped.set()

    interval = config["ticker"]["interval_seconds"]
    ticker = WorkdayTicker(interval_seconds=interval, job_func=tick_job)
    tick_job()
    if stopped.is_set():
        print("\n[勤怠タイマー] 勤務中ではありません")
        return

    ticker.start()

    def shutdown(signum, frame):
        stopped.set()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    while not stopped.wait(timeout=1):
        pass
    ticker.stop()
    print("\n[勤怠タイマー] 停止しました")


def main():
    """メイン起動処理"""
    app()


if __name__ == "__main__":
    main()
