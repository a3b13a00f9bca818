"""Check that every enabled component of a project ships a given file."""

from __future__ import annotations

import argparse
import os
import sys
from typing import Optional

from otelbuild.checkapi.goparse import GoSyntaxError, parse_imports

COMPONENT_TYPES = ("extension", "receiver", "processor", "exporter")


class MissingFileError(Exception):
    """Raised when the components file or a component's required file is missing."""


def get_import_prefixes_to_check(module: str) -> list[str]:
    """Return the import prefixes of the components of ``module``."""
    base = module.rstrip("/")
    return [f"{base}/{typ}" for typ in COMPONENT_TYPES]


def is_component_import(import_str: str, import_prefixes_to_check: list[str]) -> bool:
    """Tell whether an import path is one of an extension, receiver, processor or exporter."""
    return any(import_str.startswith(prefix) for prefix in import_prefixes_to_check)


def file_exists(
    project_path: str, relative_components_path: str, project_go_module: str, filename: str
) -> None:
    """Raise MissingFileError unless every component imported by the components file has ``filename``."""
    components_file = os.path.join(project_path, relative_components_path)
    try:
        os.stat(components_file)
    except OSError as exc:
        raise MissingFileError(f"failed to load file {components_file}: {exc.strerror}") from exc

    with open(components_file, encoding="utf-8") as fh:
        source = fh.read()
    try:
        imports = parse_imports(source)
    except GoSyntaxError as exc:
        raise GoSyntaxError(f"failed to load imports: {exc}") from exc

    prefixes = get_import_prefixes_to_check(project_go_module)
    for import_path in imports:
        if not is_component_import(import_path, prefixes):
            continue
        relative_component_path = import_path.replace(project_go_module, "", 1).strip("/")
        file_path = os.path.normpath(os.path.join(project_path, relative_component_path, filename))
        if not os.path.exists(file_path):
            raise MissingFileError(f"{filename} does not exist at {file_path}, add one")


def main(argv: Optional[list[str]] = None) -> int:
    """Run the ``checkfile`` command and return its exit status."""
    parser = argparse.ArgumentParser(
        prog="checkfile", description="Verify that a file exists for every enabled default component."
    )
    parser.add_argument("-project-path", "--project-path", default="", help="specify the project path")
    parser.add_argument(
        "-component-rel-path", "--component-rel-path", default="", help="specify the relative component path"
    )
    parser.add_argument("-module-name", "--module-name", default="", help="specify the project go module")
    parser.add_argument("-file-name", "--file-name", default="", help="specify the file name")
    args = parser.parse_args(argv)

    if not args.file_name:
        parser.error("Missing required argument: --file-name")

    try:
        file_exists(args.project_path, args.component_rel_path, args.module_name, args.file_name)
    except (MissingFileError, GoSyntaxError, OSError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())