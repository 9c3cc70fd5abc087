from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Dict, Any


def _get_config_path() -> Path:
    # When packaged (PyInstaller), __file__ points into the temp extraction dir.
    # Use the executable directory so config persists across runs.
    try:
        if getattr(sys, 'frozen', False):
            return Path(sys.executable).parent / 'config.json'
    except Exception:
        pass
    return Path(__file__).parent / 'config.json'


CONFIG_PATH = _get_config_path()

PRIVATE_FORMATS = ("none", "tlv", "ltv")
OUTPUT_FORMATS = ("text", "json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


DEFAULT_CONFIG = {
    "parser": {
        "including_header_length": False,
        "tpdu": False,
        "private_format": "none",
        "emv": False,
    },
    "output": {
        "format": "text",
    },
    "logging": {
        "level": "WARNING",
        "file": None,
    },
}


def _ensure_config_shape(cfg: Dict[str, Any]) -> Dict[str, Any]:
    cfg = cfg if isinstance(cfg, dict) else {}
    for section, defaults in DEFAULT_CONFIG.items():
        if section not in cfg or not isinstance(cfg[section], dict):
            cfg[section] = {}
        for key, default in defaults.items():
            if key not in cfg[section]:
                cfg[section][key] = default

    parser = cfg["parser"]
    for key in ("including_header_length", "tpdu", "emv"):
        if not isinstance(parser[key], bool):
            parser[key] = DEFAULT_CONFIG["parser"][key]
    fmt = str(parser["private_format"] or "none").strip().lower()
    parser["private_format"] = fmt if fmt in PRIVATE_FORMATS else "none"

    out_fmt = str(cfg["output"]["format"] or "text").strip().lower()
    cfg["output"]["format"] = out_fmt if out_fmt in OUTPUT_FORMATS else "text"

    level = str(cfg["logging"]["level"] or "WARNING").strip().upper()
    cfg["logging"]["level"] = level if level in LOG_LEVELS else "WARNING"
    if cfg["logging"]["file"] is not None and not isinstance(cfg["logging"]["file"], str):
        cfg["logging"]["file"] = None
    return cfg


def load_config() -> Dict[str, Any]:
    if CONFIG_PATH.exists():
        try:
            data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
        except Exception:
            data = {}
    else:
        data = {}
    return _ensure_config_shape(data)


def save_config(cfg: Dict[str, Any]) -> None:
    cfg = _ensure_config_shape(cfg)
    CONFIG_PATH.write_text(json.dumps(cfg, indent=2), encoding="utf-8")


def reset_defaults() -> Dict[str, Any]:
    cfg = json.loads(json.dumps(DEFAULT_CONFIG))
    save_config(cfg)
    return cfg


def parse_options(cfg: Dict[str, Any]) -> Dict[str, bool]:
    """Translate the parser section into keyword arguments for ``parse``."""
    parser = _ensure_config_shape(cfg)["parser"]
    return {
        "including_header_length": parser["including_header_length"],
        "tlv_private": parser["private_format"] == "tlv",
        "ltv_private": parser["private_format"] == "ltv",
        "tpdu": parser["tpdu"],
        "emv": parser["emv"],
    }
