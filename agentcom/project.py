"""Per-project configuration stored in ``.agentcom.json`` files."""

from __future__ import annotations

import json
import os
import re
from dataclasses import asdict, dataclass

PROJECT_CONFIG_FILE_NAME = ".agentcom.json"
MAX_PROJECT_SEARCH_DEPTH = 10
MAX_PROJECT_NAME_LENGTH = 64

_PROJECT_NAME_PATTERN = re.compile(r"[a-z0-9_-]+")


class ProjectConfigError(ValueError):
    """Raised for invalid project names or unreadable project config files."""


@dataclass(frozen=True)
class ProjectConfig:
    """Contents of a project config file."""

    project: str = ""


def validate_project_name(project: str) -> None:
    """Raise :class:`ProjectConfigError` if *project* is not a valid name.

    The empty string is accepted and means "no project".
    """
    if project == "":
        return
    if len(project.encode("utf-8")) > MAX_PROJECT_NAME_LENGTH:
        raise ProjectConfigError(
            f"invalid project {project!r}: must be {MAX_PROJECT_NAME_LENGTH} characters or fewer"
        )
    if not _PROJECT_NAME_PATTERN.fullmatch(project):
        raise ProjectConfigError(
            f"invalid project {project!r}: must contain only lowercase letters, "
            "numbers, hyphens, or underscores"
        )


def write_project_config(directory: str, project: str) -> str:
    """Write a new project config file in *directory* and return its path.

    Refuses to overwrite an existing file.
    """
    validate_project_name(project)

    path = os.path.join(directory, PROJECT_CONFIG_FILE_NAME)
    if os.path.lexists(path):
        raise ProjectConfigError(f"{path} already exists")

    content = json.dumps(asdict(ProjectConfig(project=project)), indent=2) + "\n"
    with open(path, "x", encoding="utf-8") as handle:
        handle.write(content)
    return path


def _decode(path: str, data: str) -> ProjectConfig:
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        raise ProjectConfigError(f"decode {path}: {exc}") from exc
    if raw is None:
        return ProjectConfig()
    if not isinstance(raw, dict):
        raise ProjectConfigError(f"decode {path}: expected a JSON object")
    project = raw.get("project")
    if project is None:
        return ProjectConfig()
    if not isinstance(project, str):
        raise ProjectConfigError(f"decode {path}: project must be a string")
    return ProjectConfig(project=project)


def load_project_config(start_dir: str) -> tuple[ProjectConfig, str | None]:
    """Search *start_dir* and its ancestors for a project config file.

    Returns the config and the path it was read from, or an empty config and
    ``None`` when no file is found within the search depth.
    """
    current = os.path.normpath(start_dir)
    for _ in range(MAX_PROJECT_SEARCH_DEPTH + 1):
        path = os.path.join(current, PROJECT_CONFIG_FILE_NAME)
        try:
            with open(path, encoding="utf-8") as handle:
                data = handle.read()
        except FileNotFoundError:
            pass
        except OSError as exc:
            raise ProjectConfigError(f"read {path}: {exc}") from exc
        else:
            config = _decode(path, data)
            validate_project_name(config.project)
            return config, path

        parent = os.path.dirname(current) or "."
        if parent == current:
            break
        current = parent

    return ProjectConfig(), None


def resolve_project(explicit: str, start_dir: str) -> str:
    """Return the explicit project if given, else the one found on disk."""
    explicit = explicit.strip()
    if explicit:
        validate_project_name(explicit)
        return explicit

    config, _ = load_project_config(start_dir)
    return config.project