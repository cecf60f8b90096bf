import json
import logging
import os
import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "smarttable")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")

# default settings
DOWNLOAD_FILENAME_DEFAULT = "table-data.csv"
DOWNLOAD_BUTTON_TEXT_DEFAULT = "Download Table Data"
DOWNLOAD_BUTTON_CLASS_DEFAULT = "table-library-download-btn"
TOP_POSITIONS = {"top-left", "top-center", "top-right"}
BOTTOM_POSITION = "bottom"


@dataclass
class DownloadConfig:
    enable: bool = False
    filename: str = DOWNLOAD_FILENAME_DEFAULT
    include_headers: bool = True
    position: Optional[str] = None
    button_text: str = DOWNLOAD_BUTTON_TEXT_DEFAULT
    button_class: str = DOWNLOAD_BUTTON_CLASS_DEFAULT
    custom_html: Optional[str] = None

    @property
    def placement(self) -> Optional[str]:
        if not self.enable:
            return None
        if self.position in TOP_POSITIONS:
            return "top"
        if self.position == BOTTOM_POSITION:
            return "bottom"
        return None


_DOWNLOAD_KEYS = {
    "enable": "enable",
    "filename": "filename",
    "includeHeaders": "include_headers",
    "include_headers": "include_headers",
    "position": "position",
    "buttonText": "button_text",
    "button_text": "button_text",
    "buttonClass": "button_class",
    "button_class": "button_class",
    "customHTML": "custom_html",
    "custom_html": "custom_html",
}


def _download_overrides(data) -> Dict[str, Any]:
    if not isinstance(data, dict):
        return {}
    overrides = {}
    for key, value in data.items():
        attr = _DOWNLOAD_KEYS.get(key)
        if attr is None:
            continue
        if attr in {"enable", "include_headers"}:
            overrides[attr] = bool(value)
        elif value is None or isinstance(value, str):
            overrides[attr] = value
    return overrides


def _default_table_id() -> str:
    return f"smart-table-{int(time.time() * 1000)}"


@dataclass
class TableConfig:
    headings: List[Any] = field(default_factory=list)
    data: List[list] = field(default_factory=list)
    table_id: str = field(default_factory=_default_table_id)
    hide_columns: Any = field(default_factory=list)
    modify_config: Dict[Any, Callable] = field(default_factory=dict)
    download: DownloadConfig = field(default_factory=DownloadConfig)

    @classmethod
    def from_options(cls, options=None, defaults: Optional[DownloadConfig] = None):
        """Build a config from camelCase or snake_case option keys."""
        options = dict(options or {})

        def pick(*keys, default=None):
            for key in keys:
                if options.get(key) is not None:
                    return options[key]
            return default

        download = replace(defaults) if defaults else DownloadConfig()
        download = replace(
            download,
            **_download_overrides(pick("downloadConfig", "download_config", "download", default={})),
        )

        return cls(
            headings=list(pick("headings", default=[])),
            data=[list(row) for row in pick("data", default=[])],
            table_id=pick("tableID", "table_id") or _default_table_id(),
            hide_columns=pick("hideColumns", "hide_columns", default=[]),
            modify_config=dict(pick("modifyConfig", "modify_config", default={})),
            download=download,
        )


def load_download_defaults(path: Optional[str] = None) -> DownloadConfig:
    """Read user download defaults from the XDG config file, if any."""
    path = path or CONFIG_JSON
    defaults = DownloadConfig()
    if not os.path.exists(path):
        return defaults

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Ignoring unreadable config %s: %s", path, exc)
        return defaults

    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is not an object", path)
        return defaults

    return replace(defaults, **_download_overrides(data.get("download")))
