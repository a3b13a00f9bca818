"""Command that checks the exported API of the Go modules below a folder."""

from __future__ import annotations

import argparse
import errno
import os
import sys
from typing import Iterator, Optional

import yaml

from otelbuild.checkapi.api import APIStruct, Config, Function, load_config, read_api, read_component_type
from otelbuild.checkapi.goparse import GoSyntaxError


class CheckError(Exception):
    """Raised when one or more modules break the configured API rules."""


def _walk(root: str) -> Iterator[str]:
    """Yield ``root`` and everything below it in lexical order, depth first."""
    yield root
    if os.path.isdir(root) and not os.path.islink(root):
        for name in sorted(os.listdir(root)):
            yield from _walk(os.path.join(root, name))


def _ignored_path(entry: str) -> str:
    parts = [part for part in entry.split(os.pathsep) if part]
    return os.path.normpath(os.path.join(*parts)) if parts else ""


def run(folder: str, config_path: str) -> list[str]:
    """Check every Go module below ``folder`` and return the module directories checked.

    Raises CheckError listing every violation found, one per line.
    """
    cfg = load_config(config_path)
    if not os.path.exists(folder):
        raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), folder)

    errors: list[str] = []
    checked: list[str] = []
    for path in _walk(folder):
        if os.path.basename(path) != "go.mod":
            continue
        base = os.path.dirname(path)
        relative_base = os.path.relpath(base, folder)
        # Nothing under an internal directory is part of the public API.
        if relative_base.startswith("internal"):
            continue
        if any(_ignored_path(entry) == relative_base for entry in cfg.ignored_paths):
            print(f"Ignoring {base} per denylist")
            continue
        component_type = read_component_type(base)
        try:
            walk_folder(cfg, base, component_type)
        except (CheckError, GoSyntaxError, OSError) as exc:
            errors.append(str(exc))
        checked.append(base)

    if errors:
        raise CheckError("\n".join(errors))
    return checked


def _matches(fn: Function, params: list[str], return_types: list[str]) -> bool:
    return fn.params == params and fn.return_types == return_types


def _has_allowed_function(cfg: Config, functions: list[Function], component_type: str) -> bool:
    return any(
        fn.name == desc.name and _matches(fn, desc.parameters, desc.return_types)
        for desc in cfg.allowed_functions
        if component_type in desc.classes
        for fn in functions
    )


def walk_folder(cfg: Config, folder: str, component_type: str) -> None:
    """Check the API of the package in ``folder``, raising CheckError on violations."""
    result = read_api(folder, cfg.ignored_functions, cfg.excluded_files)
    structs = sorted(result.structs, key=lambda s: s.name, reverse=True)
    functions = sorted(result.functions, key=lambda f: f.name)
    if not structs and not result.values and not functions:
        return

    errors: list[str] = []
    if cfg.allowed_functions and not _has_allowed_function(cfg, functions, component_type):
        errors.append(f"[{folder}] no function matching configuration found")

    if cfg.unkeyed_literal.enabled:
        for struct in structs:
            try:
                check_struct_disallow_unkeyed_literal(cfg, struct, folder)
            except CheckError as exc:
                errors.append(str(exc))

    if errors:
        raise CheckError("\n".join(errors))


def check_struct_disallow_unkeyed_literal(cfg: Config, s: APIStruct, folder: str) -> None:
    """Raise CheckError if an exported struct can be built with an unkeyed literal."""
    if not s.name[:1].isupper():
        return
    if len(s.fields) > cfg.unkeyed_literal.limit or not s.fields:
        return
    if any(not name[:1].isupper() for name in s.fields):
        return
    raise CheckError(f'{folder} struct "{s.name}" does not prevent unkeyed literal initialization')


def main(argv: Optional[list[str]] = None) -> int:
    """Run the ``checkapi`` command and return its exit status."""
    parser = argparse.ArgumentParser(
        prog="checkapi", description="Check the API of the Go modules below a folder."
    )
    parser.add_argument("-folder", "--folder", default=".", help="folder investigated for modules")
    parser.add_argument(
        "-config", "--config", default="cmd/checkapi/config.yaml", help="configuration file"
    )
    args = parser.parse_args(argv)
    try:
        run(args.folder, args.config)
    except (CheckError, OSError, ValueError, yaml.YAMLError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())