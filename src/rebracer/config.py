"""Layered TOML settings for rebracer itself.

Sections are dataclasses registered with ``@configurable(name)``. A loaded
section starts from the dataclass defaults, then applies the user file,
then the project file:

    ~/.config/rebracer/config.toml     user-wide
    <project>/.rebracer/config.toml    per project (wins)

Values are stored as written; each section validates its own keys before
anything is persisted.
"""

from __future__ import annotations

import dataclasses
import pathlib
import tomllib
from typing import Any, TypeVar

T = TypeVar("T")

_SECTIONS: dict[str, type] = {}

SCOPES = ("local", "global")


def configurable(name: str):
    """Register the decorated dataclass as config section *name*."""

    def decorator(cls: type[T]) -> type[T]:
        _SECTIONS[name] = cls
        return cls

    return decorator


def section_class(name: str) -> type:
    try:
        return _SECTIONS[name]
    except KeyError:
        raise KeyError(f"Unknown config section: {name}") from None


def _global_path() -> pathlib.Path:
    return pathlib.Path.home() / ".config" / "rebracer" / "config.toml"


def _local_path(root: pathlib.Path) -> pathlib.Path:
    return root / ".rebracer" / "config.toml"


def config_path(scope: str, root: pathlib.Path | None = None) -> pathlib.Path:
    """Return the file that holds overrides for *scope*."""
    if scope not in SCOPES:
        raise ValueError(f"Unknown scope: {scope!r} (expected one of {', '.join(SCOPES)})")
    if scope == "global":
        return _global_path()
    return _local_path(root if root is not None else pathlib.Path.cwd())


def _read(path: pathlib.Path) -> dict[str, Any]:
    # A missing or unreadable file contributes nothing.
    try:
        return tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}


def _write(path: pathlib.Path, data: dict[str, Any]) -> None:
    import tomli_w

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(tomli_w.dumps(data).encode())


def load(name: str, root: pathlib.Path | None = None) -> Any:
    """Build section *name* from defaults, user file, then project file."""
    cls = section_class(name)
    fields = {f.name for f in dataclasses.fields(cls)}
    values: dict[str, Any] = {}
    for scope in ("global", "local"):
        layer = _read(config_path(scope, root)).get(name, {})
        values.update((k, v) for k, v in layer.items() if k in fields)
    return cls(**values)


def write_override(
    name: str,
    key: str,
    value: Any,
    *,
    scope: str = "local",
    root: pathlib.Path | None = None,
) -> pathlib.Path:
    """Persist ``name.key = value`` in the *scope* file and return its path."""
    cls = section_class(name)
    if key not in {f.name for f in dataclasses.fields(cls)}:
        raise KeyError(f"Unknown key: {name}.{key}")
    path = config_path(scope, root)
    data = _read(path)
    data.setdefault(name, {})[key] = value
    _write(path, data)
    return path


def remove_override(
    name: str,
    key: str,
    *,
    scope: str = "local",
    root: pathlib.Path | None = None,
) -> bool:
    """Drop ``name.key`` from the *scope* file. Returns False if it was unset."""
    path = config_path(scope, root)
    data = _read(path)
    section = data.get(name, {})
    if key not in section:
        return False
    del section[key]
    if not section:
        del data[name]
    _write(path, data)
    return True
