import json
from pathlib import Path

from .defaults import DEFAULT_POLICY, META_DIR_NAME
from .models import BulkDatePolicy

CONFIG_PATH = Path.home() / META_DIR_NAME / "config.json"


def load_config() -> dict:
    try:
        if CONFIG_PATH.exists():
            data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                return data
    except (OSError, ValueError):
        pass  # ignore bad config
    return {}


def save_config(data: dict) -> None:
    CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
    CONFIG_PATH.write_text(json.dumps(data, indent=2), encoding="utf-8")


def _update(key: str, value) -> None:
    data = load_config()
    data[key] = value
    save_config(data)


def load_policy() -> BulkDatePolicy:
    try:
        return BulkDatePolicy(load_config().get("policy", DEFAULT_POLICY.value))
    except ValueError:
        return DEFAULT_POLICY


def save_policy(policy: BulkDatePolicy) -> None:
    _update("policy", policy.value)


def load_last_folder() -> str:
    return load_config().get("last_folder", "")


def save_last_folder(path: Path) -> None:
    _update("last_folder", str(path))
