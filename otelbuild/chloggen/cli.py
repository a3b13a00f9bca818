"""Command line interface for creating, validating and applying changelog entries."""

from __future__ import annotations

import argparse
import os
import sys
from typing import TextIO

from otelbuild.chloggen.config import Config, ConfigError, default_config, load_config
from otelbuild.chloggen.entry import EntryValidationError, delete_entries, read_entries
from otelbuild.chloggen.summary import TemplateError, generate_summary

INSERT_POINT = "<!-- next version -->\n"

_DESCRIPTION = (
    "chloggen is a tool used to automate the generation of CHANGELOG files "
    "using individual yaml files as the source."
)


class ChangelogError(Exception):
    """Raised when a changelog file cannot be updated."""


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``chloggen`` command."""
    parser = argparse.ArgumentParser(prog="chloggen", description=_DESCRIPTION)
    parser.add_argument("--config", default="", help="(optional) chloggen config file")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config", default=argparse.SUPPRESS, help="(optional) chloggen config file"
    )

    sub = parser.add_subparsers(dest="command", title="Available Commands", metavar="command")

    new = sub.add_parser(
        "new", parents=[common], help="Creates new change file", description="Creates new change file"
    )
    new.add_argument("-f", "--filename", required=True, help="name of the file to add")

    update = sub.add_parser(
        "update",
        parents=[common],
        help="Updates CHANGELOG.MD to include all new changes",
        description="Updates CHANGELOG.MD to include all new changes",
    )
    update.add_argument(
        "-v",
        "--version",
        default="vTODO",
        help='will be rendered directly into the update text (default "vTODO")',
    )
    update.add_argument(
        "-d", "--dry", action="store_true", help="will generate the update text and print to stdout"
    )
    update.add_argument(
        "-c", "--component", default="", help="only select entries with this exact component"
    )

    sub.add_parser(
        "validate",
        parents=[common],
        help="Validates the files in the changelog directory",
        description="Validates the files in the changelog directory",
    )
    return parser


def clean_file_name(filename: str) -> str:
    """Replace path separators so the name stays inside the entries directory."""
    return filename.replace("/", "_").replace("\\", "_")


def repo_root() -> str:
    """Return the current working directory, taken as the repository root."""
    try:
        return os.getcwd()
    except OSError:
        print("FAIL: Could not determine current working directory")
        return ""


def new_entry(cfg: Config, filename: str, out: TextIO) -> str:
    """Copy the entry template to a new file in the entries directory and return its path."""
    path = os.path.join(cfg.entries_dir, clean_file_name(filename))
    ext = os.path.splitext(path)[1]
    if ext == ".yaml":
        path_with_ext = path
    elif ext == ".yml":
        path_with_ext = path[: -len(".yml")] + ".yaml"
    else:
        path_with_ext = path + ".yaml"

    with open(os.path.normpath(cfg.template_yaml), "rb") as fh:
        template = fh.read()
    with open(path_with_ext, "wb") as fh:
        fh.write(template)
    out.write(f"Changelog entry template copied to: {path_with_ext}\n")
    return path_with_ext


def update_changelogs(
    cfg: Config, version: str, dry: bool, component_filter: str, out: TextIO
) -> None:
    """Render pending entries into each changelog, or print them when ``dry``."""
    entries_by_changelog = read_entries(cfg)

    for key, entries in entries_by_changelog.items():
        if component_filter:
            entries = [e for e in entries if e.component == component_filter]
        update = generate_summary(version, entries, cfg)

        if dry:
            out.write(f"Generated changelog updates for {key}:")
            out.write(update + "\n")
            continue

        if key not in cfg.change_logs:
            raise ChangelogError(f"no changelog file is configured for '{key}'")
        filename = cfg.change_logs[key]
        with open(os.path.normpath(filename), encoding="utf-8", newline="") as fh:
            old = fh.read()
        parts = old.split(INSERT_POINT)
        if len(parts) != 2:
            raise ChangelogError(f"expected one instance of {INSERT_POINT}")
        header, history = parts

        tmp_md = filename + ".tmp"
        with open(os.path.normpath(tmp_md), "w", encoding="utf-8", newline="") as fh:
            fh.write(header + INSERT_POINT + update + history)
        os.replace(tmp_md, filename)

        out.write(f"Finished updating {filename}\n")
        delete_entries(cfg)


def validate_entries(cfg: Config, out: TextIO) -> None:
    """Validate every entry in the entries directory, raising on the first invalid one."""
    os.stat(cfg.entries_dir)

    entries_by_changelog = read_entries(cfg)
    changelog_required = not cfg.default_change_logs
    valid_change_logs = list(cfg.change_logs)
    for entries in entries_by_changelog.values():
        for entry in entries:
            entry.validate(changelog_required, cfg.components, *valid_change_logs)
    out.write(f"PASS: all files in {cfg.entries_dir}/ are valid\n")


def main(argv: list[str] | None = None) -> int:
    """Run the ``chloggen`` command and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help(sys.stdout)
        return 0

    root = repo_root()
    if args.config:
        try:
            cfg = load_config(root, args.config)
        except (OSError, ConfigError) as exc:
            print(f"FAIL: Could not load config file: {exc}")
            return 1
    else:
        cfg = default_config(root)

    try:
        if args.command == "new":
            new_entry(cfg, args.filename, sys.stdout)
        elif args.command == "update":
            update_changelogs(cfg, args.version, args.dry, args.component, sys.stdout)
        else:
            validate_entries(cfg, sys.stdout)
    except (OSError, ChangelogError, EntryValidationError, ConfigError, TemplateError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())