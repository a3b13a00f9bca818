"""Changelog entries: validation and reading from the entries directory."""

from __future__ import annotations

import glob
import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import yaml

from otelbuild.chloggen.config import Config


class ChangeType(str, Enum):
    """The kinds of change an entry may describe."""

    BREAKING = "breaking"
    DEPRECATION = "deprecation"
    NEW_COMPONENT = "new_component"
    ENHANCEMENT = "enhancement"
    BUG_FIX = "bug_fix"


_CHANGE_TYPES = [ct.value for ct in ChangeType]


class EntryValidationError(ValueError):
    """Raised when an entry is invalid or cannot be decoded."""


def _go_list(items: list[Any]) -> str:
    return "[" + " ".join(str(item) for item in items) + "]"


@dataclass
class Entry:
    """A single changelog entry as stored in a YAML file."""

    change_logs: list[str] = field(default_factory=list)
    change_type: str = ""
    component: str = ""
    note: str = ""
    issues: list[int] = field(default_factory=list)
    sub_text: str = ""

    def validate(self, require_changelog: bool, components: list[str], *args: str) -> None:
        """Raise EntryValidationError if the entry is incomplete or inconsistent."""
        valid_change_logs = list(args)
        if require_changelog and not self.change_logs:
            raise EntryValidationError("specify one or more 'change_logs'")
        for cl in self.change_logs:
            if cl not in valid_change_logs:
                raise EntryValidationError(
                    f"'{cl}' is not a valid value in 'change_logs'. "
                    f"Specify one of {_go_list(valid_change_logs)}"
                )
        if self.change_type not in _CHANGE_TYPES:
            raise EntryValidationError(
                f"'{self.change_type}' is not a valid 'change_type'. Specify one of {_go_list(_CHANGE_TYPES)}"
            )
        if not self.component.strip():
            raise EntryValidationError("specify a 'component'")
        # Components are only checked when a list of valid ones is configured.
        if components and self.component not in components:
            raise EntryValidationError(
                f"{self.component} is not a valid 'component'. It must be one of {_go_list(components)}"
            )
        if not self.note.strip():
            raise EntryValidationError("specify a 'note'")
        if not self.issues:
            raise EntryValidationError("specify one or more issues #'s")

    def to_yaml(self) -> str:
        """Serialize the entry in the entries-directory YAML format."""
        return yaml.safe_dump(
            {
                "change_logs": list(self.change_logs),
                "change_type": self.change_type,
                "component": self.component,
                "note": self.note,
                "issues": list(self.issues),
                "subtext": self.sub_text,
            },
            sort_keys=False,
            allow_unicode=True,
        )


def _scalar(value: Any, key: str, source: str) -> str:
    if value is None:
        return ""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value)
    raise EntryValidationError(f"yaml: unmarshal errors: cannot decode '{key}' as a string in {source}")


def _entry_from_data(data: Any, source: str) -> Entry:
    if data is None:
        return Entry()
    if not isinstance(data, dict):
        raise EntryValidationError(
            f"yaml: unmarshal errors: cannot unmarshal {type(data).__name__} into an entry in {source}"
        )

    raw_logs = data.get("change_logs") or []
    if not isinstance(raw_logs, list):
        raise EntryValidationError(f"yaml: unmarshal errors: 'change_logs' must be a list in {source}")

    raw_issues = data.get("issues") or []
    if not isinstance(raw_issues, list) or any(
        not isinstance(i, int) or isinstance(i, bool) for i in raw_issues
    ):
        raise EntryValidationError(f"yaml: unmarshal errors: 'issues' must be a list of integers in {source}")

    return Entry(
        change_logs=[_scalar(cl, "change_logs", source) for cl in raw_logs],
        change_type=_scalar(data.get("change_type"), "change_type", source),
        component=_scalar(data.get("component"), "component", source),
        note=_scalar(data.get("note"), "note", source),
        issues=list(raw_issues),
        sub_text=_scalar(data.get("subtext"), "subtext", source),
    )


def _entry_files(cfg: Config) -> list[str]:
    skipped = {os.path.normpath(p) for p in (cfg.template_yaml, cfg.config_yaml) if p}
    return [
        path
        for path in sorted(glob.glob(os.path.join(glob.escape(cfg.entries_dir), "*.yaml")))
        if os.path.normpath(path) not in skipped
    ]


def read_entries(cfg: Config) -> dict[str, list[Entry]]:
    """Read every entry file and group the entries by changelog key."""
    entries: dict[str, list[Entry]] = {key: [] for key in cfg.change_logs}
    for path in _entry_files(cfg):
        with open(path, encoding="utf-8") as fh:
            text = fh.read()
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise EntryValidationError(f"yaml: {exc}") from exc
        entry = _entry_from_data(data, path)
        entry.sub_text = entry.sub_text.replace("\r\n", "\n")

        targets = entry.change_logs or cfg.default_change_logs
        for key in targets:
            entries.setdefault(key, []).append(entry)
    return entries


def delete_entries(cfg: Config) -> None:
    """Remove every entry file, keeping the template and configuration files."""
    for path in _entry_files(cfg):
        try:
            os.remove(path)
        except OSError:
            print(f"Failed to delete: {path}")