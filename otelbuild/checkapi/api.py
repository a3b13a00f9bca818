"""Collection of a Go module's exported API and the check configuration."""

from __future__ import annotations

import fnmatch
import os
import re
from dataclasses import dataclass, field
from typing import Any

import yaml

from otelbuild.checkapi.goast import expr_to_string
from otelbuild.checkapi.goparse import FuncDecl, GoFile, TypeSpec, ValueSpec, parse_source
from otelbuild.checkapi.goast import StructType


@dataclass
class Function:
    """An exported function or method."""

    name: str
    receiver: str = ""
    return_types: list[str] = field(default_factory=list)
    params: list[str] = field(default_factory=list)
    type_params: list[str] = field(default_factory=list)


@dataclass
class APIStruct:
    """A struct type and the first name of each of its named fields."""

    name: str
    fields: list[str] = field(default_factory=list)


@dataclass
class API:
    """The values, structs and functions declared by a package."""

    values: list[str] = field(default_factory=list)
    structs: list[APIStruct] = field(default_factory=list)
    functions: list[Function] = field(default_factory=list)


@dataclass
class FunctionDescription:
    """A function signature allowed for some component classes."""

    classes: list[str] = field(default_factory=list)
    name: str = ""
    parameters: list[str] = field(default_factory=list)
    return_types: list[str] = field(default_factory=list)


@dataclass
class UnkeyedLiteral:
    """Settings of the unkeyed literal initialization check."""

    enabled: bool = False
    limit: int = 0


@dataclass
class Config:
    """Configuration of the API check."""

    ignored_paths: list[str] = field(default_factory=list)
    excluded_files: list[str] = field(default_factory=list)
    allowed_functions: list[FunctionDescription] = field(default_factory=list)
    ignored_functions: list[str] = field(default_factory=list)
    unkeyed_literal: UnkeyedLiteral = field(default_factory=UnkeyedLiteral)


def _strs(value: Any) -> list[str]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"expected a list, got {value!r}")
    return [str(v) for v in value]


def _mapping(value: Any) -> dict:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise ValueError(f"expected a mapping, got {value!r}")
    return value


def load_config(path: str) -> Config:
    """Read a check configuration from a YAML file."""
    with open(path, encoding="utf-8") as fh:
        try:
            data = _mapping(yaml.safe_load(fh))
        except yaml.YAMLError as exc:
            raise ValueError(f"invalid config file {path}: {exc}") from exc
    unkeyed = _mapping(data.get("unkeyed_literal_initialization"))
    allowed = []
    for item in data.get("allowed_functions") or []:
        item = _mapping(item)
        allowed.append(
            FunctionDescription(
                classes=_strs(item.get("classes")),
                name=str(item.get("name") or ""),
                parameters=_strs(item.get("parameters")),
                return_types=_strs(item.get("return_types")),
            )
        )
    return Config(
        ignored_paths=_strs(data.get("ignored_paths")),
        excluded_files=_strs(data.get("excluded_files")),
        allowed_functions=allowed,
        ignored_functions=_strs(data.get("ignored_functions")),
        unkeyed_literal=UnkeyedLiteral(
            enabled=bool(unkeyed.get("enabled", False)),
            limit=int(unkeyed.get("limit") or 0),
        ),
    )


def read_component_type(folder: str) -> str:
    """Return the component class from ``metadata.yaml``, or ``pkg`` when absent."""
    path = os.path.join(folder, "metadata.yaml")
    if not os.path.exists(path):
        return "pkg"
    with open(path, encoding="utf-8") as fh:
        data = _mapping(yaml.safe_load(fh))
    status = _mapping(data.get("status"))
    return str(status.get("class") or "")


def _exported(name: str) -> bool:
    return name[:1].isupper()


def _is_ignored(ignored_functions: list[str], name: str) -> bool:
    return any(re.search(pattern, name) for pattern in ignored_functions)


def _collect(ignored_functions: list[str], gofile: GoFile, result: API) -> None:
    for decl in gofile.decls:
        if isinstance(decl, ValueSpec):
            result.values.extend(n for n in decl.names if _exported(n))
        elif isinstance(decl, TypeSpec):
            if isinstance(decl.type, StructType):
                result.structs.append(
                    APIStruct(decl.name, [f.names[0] for f in decl.type.fields or [] if f.names])
                )
        elif isinstance(decl, FuncDecl):
            if not _exported(decl.name):
                continue
            receiver = ""
            if decl.recv:
                names = [n for f in decl.recv for n in f.names if _exported(n)]
                exported = bool(names)
                if names:
                    receiver = names[-1]
            else:
                exported = not _is_ignored(ignored_functions, decl.name)
            if exported:
                sig = decl.type
                result.functions.append(
                    Function(
                        name=decl.name,
                        receiver=receiver,
                        return_types=[expr_to_string(f.type) for f in sig.results or []],
                        params=[expr_to_string(f.type) for f in sig.params or []],
                        type_params=[expr_to_string(f.type) for f in sig.type_params or []],
                    )
                )


def read_api(folder: str, ignored_functions: list[str], excluded_files: list[str]) -> API:
    """Parse every ``.go`` file in ``folder`` and collect its API."""
    result = API()
    for name in sorted(os.listdir(folder)):
        path = os.path.join(folder, name)
        if not name.endswith(".go") or not os.path.isfile(path):
            continue
        if any(fnmatch.fnmatchcase(name, pattern) for pattern in excluded_files):
            continue
        with open(path, encoding="utf-8") as fh:
            gofile = parse_source(fh.read())
        _collect(ignored_functions, gofile, result)
    return result