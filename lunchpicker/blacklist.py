"""Blacklist loading."""
from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

from .errors import ConfigurationError


def load_blacklist_file(path: Union[str, Path]) -> FrozenSet[str]:
    """Read one restaurant name per line; blank lines are ignored.

    A file that yields no names is rejected.
    """
    file_path = Path(path).expanduser()
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Cannot read blacklist file {file_path}: {exc}") from exc
    names = frozenset(line.strip() for line in text.splitlines() if line.strip())
    if not names:
        raise ConfigurationError(f"Blacklist file {file_path} contains no names")
    return names


def resolve_blacklist(
    names: Optional[Iterable[str]] = None,
    path: Optional[Union[str, Path]] = None,
) -> FrozenSet[str]:
    """Build the blacklist from exactly one of an explicit name list or a file."""
    if names is not None and path is not None:
        raise ConfigurationError("Provide either a blacklist or a blacklist file, not both")
    if path is not None:
        return load_blacklist_file(path)
    if names is None:
        raise ConfigurationError("A blacklist or a blacklist file is required")
    if isinstance(names, str):
        raise ConfigurationError("Blacklist must be a collection of names, not a single string")
    return frozenset(str(name) for name in names)
