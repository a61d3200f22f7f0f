import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any

DISTRIBUTION_NAME = "db-errors"


def find_pyproject(start: Path, max_up: int = 5) -> Path | None:
    p = start
    for _ in range(max_up):
        candidate = p / "pyproject.toml"
        if candidate.exists():
            return candidate
        if p.parent == p:
            break
        p = p.parent
    return None


def get_pyproject_value(key: str, start: Path | None = None, max_up: int = 5, default: Any = None) -> Any:
    """
    Return the value for a dot-separated `key` ("project.version") from the nearest pyproject.toml.

    Returns `default` when the file is missing, unreadable, or the key is absent.
    """
    pyproject = find_pyproject(start or Path(__file__).resolve().parent, max_up=max_up)
    if not pyproject:
        return default

    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return default

    cur: Any = data
    for part in key.split("."):
        if isinstance(cur, dict) and part in cur:
            cur = cur[part]
        else:
            return default
    return cur


def get_project_name(default: str | None = None) -> str | None:
    return get_pyproject_value("project.name", default=default) or default


def get_project_version(default: str = "unknown") -> str:
    """
    Installed distribution version first (wheels, containers), then project.version from a
    source checkout, then `default`.
    """
    try:
        return importlib_metadata.version(DISTRIBUTION_NAME)
    except importlib_metadata.PackageNotFoundError:
        pass

    value = get_pyproject_value("project.version")
    return value if isinstance(value, str) else default


__all__ = ["find_pyproject", "get_pyproject_value", "get_project_name", "get_project_version"]
