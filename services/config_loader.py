import copy
import os
import yaml
from pathlib import Path

from dotenv import load_dotenv

DEFAULT_CONFIG = {
    "ticker": {
        "interval_seconds": 1,
    },
    "workday": {
        "standard_seconds": 8 * 3600,
        "standard_pause_seconds": 3600,
        "pause_alert_minutes": 120,
    },
    "store": {
        "backend": "yaml",
        "path": "workdays.yaml",
    },
    "slack": {
        "enabled": False,
        "notify_channel": "",
    },
    "user": {
        "id": "local",
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """ベース設定にオーバーライドをマージする"""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config(path: str = "config.yaml") -> dict:
    """YAML設定ファイルをロードし、デフォルト設定とマージして返す"""
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            user_config = yaml.safe_load(f) or {}
        return _deep_merge(copy.deepcopy(DEFAULT_CONFIG), user_config)
    return copy.deepcopy(DEFAULT_CONFIG)


def apply_env_overrides(config: dict) -> dict:
    """.env・環境変数の値で設定を上書きする"""
    load_dotenv()

    overrides = {}
    store_path = os.getenv("WORKDAY_STORE_PATH")
    if store_path:
        overrides["store"] = {"path": store_path}
    user_id = os.getenv("WORKDAY_USER_ID")
    if user_id:
        overrides["user"] = {"id": user_id}
    channel = os.getenv("SLACK_NOTIFY_CHANNEL")
    if channel:
        overrides["slack"] = {"notify_channel": channel}

    return _deep_merge(config, overrides)
