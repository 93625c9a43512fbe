from unittest.mock import patch

import pytest
import yaml

from services.store_interface import WorkdayEvent, WorkdayRecord
from services.yaml_store import YamlWorkdayStore


def _record(**overrides):
    base = dict(
        id="w1",
        user_id="u1",
        work_date="2026-02-22",
        started_at="2026-02-22T09:00:00+00:00",
        status="active",
    )
    base.update(overrides)
    return WorkdayRecord(**base)


def test_missing_file_reads_empty(tmp_path):
    store = YamlWorkdayStore(path=str(tmp_path / "none.yaml"))
    assert store.get("w1") is None
    assert store.list_between("u1", "2026-01-01", "2026-12-31") == []


def test_insert_persists_to_file(tmp_path):
    """別インスタンスからも読めること"""
    path = tmp_path / "workdays.yaml"
    YamlWorkdayStore(path=str(path)).insert(_record())

    reloaded = YamlWorkdayStore(path=str(path)).get_for_date("u1", "2026-02-22")
    assert reloaded.id == "w1"
    assert reloaded.work_date == "2026-02-22"
    assert reloaded.started_at == "2026-02-22T09:00:00+00:00"


def test_update(tmp_path):
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    store.insert(_record())
    updated = store.update("w1", {"paused_at": "2026-02-22T12:00:00+00:00", "status": "paused"})
    assert updated.status == "paused"
    assert store.get("w1").paused_at == "2026-02-22T12:00:00+00:00"


def test_update_unknown_id(tmp_path):
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    with pytest.raises(KeyError):
        store.update("missing", {"status": "paused"})


def test_events(tmp_path):
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    store.add_event(WorkdayEvent(id="e2", workday_id="w1", event_type="finish", timestamp="2026-02-22T18:00:00+00:00"))
    store.add_event(WorkdayEvent(id="e1", workday_id="w1", event_type="start", timestamp="2026-02-22T09:00:00+00:00"))
    events = store.list_events("w1")
    assert [e.event_type for e in events] == ["start", "finish"]
    assert events[0].metadata == {}


def test_list_between(tmp_path):
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    store.insert(_record(id="a", work_date="2026-02-16"))
    store.insert(_record(id="b", work_date="2026-02-22"))
    store.insert(_record(id="c", work_date="2026-02-23"))
    assert [r.id for r in store.list_between("u1", "2026-02-16", "2026-02-22")] == ["a", "b"]


def test_get_open(tmp_path):
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    store.insert(_record(id="done", work_date="2026-02-21", ended_at="2026-02-21T18:00:00+00:00"))
    store.insert(_record(id="open", work_date="2026-02-22"))
    assert store.get_open("u1").id == "open"
    assert store.get_open("u2") is None


def test_save_leaves_no_temp_files(tmp_path):
    """書き込みは置き換えで行い、一時ファイルを残さないこと"""
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    store.insert(_record())
    store.update("w1", {"status": "paused"})
    assert sorted(p.name for p in tmp_path.iterdir()) == ["workdays.yaml"]


def test_failed_save_keeps_previous_file(tmp_path):
    """書き込み失敗時も既存ファイルは壊れないこと"""
    store = YamlWorkdayStore(path=str(tmp_path / "workdays.yaml"))
    store.insert(_record())

    with patch("services.yaml_store.yaml.safe_dump", side_effect=yaml.YAMLError("boom")):
        with pytest.raises(yaml.YAMLError):
            store.update("w1", {"status": "paused"})

    assert store.get("w1").status == "active"
    assert sorted(p.name for p in tmp_path.iterdir()) == ["workdays.yaml"]
