"""Configuration for the changelog generator."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Any

import yaml

DEFAULT_ENTRIES_DIR = ".chloggen"
DEFAULT_TEMPLATE_YAML = "TEMPLATE.yaml"
DEFAULT_CHANGELOG_KEY = "default"
DEFAULT_CHANGELOG_FILENAME = "CHANGELOG.md"


class ConfigError(ValueError):
    """Raised when a changelog configuration file is malformed or inconsistent."""


@dataclass
class Config:
    """Where changelog entries live and which changelog files they feed."""

    change_logs: dict[str, str] = field(default_factory=dict)
    default_change_logs: list[str] = field(default_factory=list)
    entries_dir: str = ""
    template_yaml: str = ""
    summary_template: str = ""
    components: list[str] = field(default_factory=list)
    config_yaml: str = ""


def _join(*parts: str) -> str:
    return os.path.normpath(os.path.join(*parts))


def default_config(root_dir: str) -> Config:
    """Return the configuration used when no configuration file is given."""
    return Config(
        change_logs={DEFAULT_CHANGELOG_KEY: _join(root_dir, DEFAULT_CHANGELOG_FILENAME)},
        default_change_logs=[DEFAULT_CHANGELOG_KEY],
        entries_dir=_join(root_dir, DEFAULT_ENTRIES_DIR),
        template_yaml=_join(root_dir, DEFAULT_ENTRIES_DIR, DEFAULT_TEMPLATE_YAML),
    )


def _as_str(value: Any, key: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise ConfigError(f"'{key}' must be a string")


def _as_str_list(value: Any, key: str) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ConfigError(f"'{key}' must be a list of strings")
    return [_as_str(item, key) for item in value]


def _as_str_map(value: Any, key: str) -> dict[str, str]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping of strings")
    return {_as_str(k, key): _as_str(v, key) for k, v in value.items()}


def load_config(root_dir: str, cfg_filename: str) -> Config:
    """Load a configuration file relative to ``root_dir`` and resolve its paths."""
    cfg_yaml = _join(root_dir, cfg_filename)
    with open(cfg_yaml, encoding="utf-8") as fh:
        text = fh.read()
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"invalid config file {cfg_yaml}: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"invalid config file {cfg_yaml}: expected a mapping")

    cfg = Config(
        change_logs=_as_str_map(data.get("change_logs"), "change_logs"),
        default_change_logs=_as_str_list(data.get("default_change_logs"), "default_change_logs"),
        entries_dir=_as_str(data.get("entries_dir"), "entries_dir"),
        template_yaml=_as_str(data.get("template_yaml"), "template_yaml"),
        summary_template=_as_str(data.get("summary_template"), "summary_template"),
        components=_as_str_list(data.get("components"), "components"),
        config_yaml=cfg_yaml,
    )

    if not cfg.entries_dir:
        cfg.entries_dir = _join(root_dir, DEFAULT_ENTRIES_DIR)
    elif not cfg.entries_dir.startswith(root_dir):
        cfg.entries_dir = _join(root_dir, cfg.entries_dir)

    if not cfg.template_yaml:
        cfg.template_yaml = _join(root_dir, DEFAULT_ENTRIES_DIR, DEFAULT_TEMPLATE_YAML)
    elif not cfg.template_yaml.startswith(root_dir):
        cfg.template_yaml = _join(root_dir, cfg.template_yaml)

    if not cfg.change_logs and cfg.default_change_logs:
        raise ConfigError("cannot specify 'default_changelogs' without 'changelogs'")

    if not cfg.change_logs:
        cfg.change_logs[DEFAULT_CHANGELOG_KEY] = _join(root_dir, DEFAULT_CHANGELOG_FILENAME)
        cfg.default_change_logs = [DEFAULT_CHANGELOG_KEY]
        return cfg

    # Changelog filenames are relative to root_dir unless they already include it.
    cfg.change_logs = {
        key: filename if filename.startswith(root_dir) else _join(root_dir, filename)
        for key, filename in cfg.change_logs.items()
    }

    for key in cfg.default_change_logs:
        if key not in cfg.change_logs:
            raise ConfigError(
                f"'default_changelogs' contains key \"{key}\" which is not defined in 'changelogs'"
            )

    return cfg