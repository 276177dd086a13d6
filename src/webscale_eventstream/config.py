"""
Configuration paths and the JSON-file backed config reader.

File layout:
    {"default": {"<path>": value}, "websites": {"<code>": {"<path>": value}}}
Website values override default ones.
"""

import json
from pathlib import Path
from typing import Any, Optional

XML_PATH_ENABLED = "webscale_eventstream/general/enabled"
XML_PATH_LOGGING = "webscale_eventstream/developer/logging"

SCOPE_DEFAULT = "default"
SCOPE_WEBSITE = "website"

FLAGS = {"enabled": XML_PATH_ENABLED, "logging": XML_PATH_LOGGING}

CONFIG_FILE = Path.home() / ".eventstream" / "config.json"

TRUTHY = {"1", "true", "yes", "on"}


def is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in TRUTHY
    return bool(value)


def load_config(path: Optional[Path] = None) -> dict:
    try:
        data = json.loads((path or CONFIG_FILE).read_text())
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(cfg: dict, path: Optional[Path] = None) -> None:
    path = path or CONFIG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(cfg, indent=2))


class FileConfig:
    def __init__(self, website_code: Optional[str] = None, path: Optional[Path] = None):
        self._website_code = website_code
        self._path = path

    def get_value(self, path: str, scope: str = SCOPE_DEFAULT) -> Any:
        cfg = load_config(self._path)
        value = cfg.get("default", {}).get(path)
        if scope == SCOPE_WEBSITE and self._website_code:
            website = cfg.get("websites", {}).get(self._website_code, {})
            if path in website:
                value = website[path]
        return value

    def is_set_flag(self, path: str, scope: str) -> bool:
        return is_truthy(self.get_value(path, scope))

    def set_value(self, path: str, value: Any, website_code: Optional[str] = None) -> None:
        cfg = load_config(self._path)
        if website_code:
            cfg.setdefault("websites", {}).setdefault(website_code, {})[path] = value
        else:
            cfg.setdefault("default", {})[path] = value
        save_config(cfg, self._path)
