"""Skill files for AI coding agents: target resolution, rendering and writing."""

from __future__ import annotations

import enum
import os
import re
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SKILL_DESCRIPTION = "Skill generated by agentcom"

_SKILL_NAME_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")

TEMPLATE_SKILL_AGENTS = ("claude", "codex", "gemini", "opencode")
"""Agents that receive the skills generated for templates."""


class SkillError(Exception):
    """Raised for invalid skill names, scopes or agents, and failed writes."""


class SkillFileName(str, enum.Enum):
    """How an agent lays out a skill on disk."""

    STANDARD = "SKILL.md"
    MARKDOWN = ".md"
    CURSOR = ".mdc"


@dataclass(frozen=True)
class SkillAgentDefinition:
    """Where one agent keeps its skills."""

    id: str
    project_rel_dir: str
    user_rel_dir: str
    file_name: SkillFileName = SkillFileName.STANDARD
    aliases: tuple[str, ...] = ()


@dataclass(frozen=True)
class SkillTarget:
    """A file a skill is written to for one agent."""

    agent: str
    path: str

    def to_dict(self) -> dict[str, str]:
        """Return the JSON form of the target."""
        return {"agent": self.agent, "path": self.path}


@dataclass(frozen=True)
class SkillCreation:
    """The outcome of creating a skill."""

    name: str
    scope: str
    description: str
    targets: list[SkillTarget] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Return the JSON form of the result."""
        return {
            "name": self.name,
            "scope": self.scope,
            "description": self.description,
            "targets": [target.to_dict() for target in self.targets],
        }


def _define(
    agent_id: str,
    directory: str,
    file_name: SkillFileName = SkillFileName.STANDARD,
    aliases: tuple[str, ...] = (),
) -> SkillAgentDefinition:
    rel_dir = os.path.join(directory, "skills")
    return SkillAgentDefinition(
        id=agent_id,
        project_rel_dir=rel_dir,
        user_rel_dir=rel_dir,
        file_name=file_name,
        aliases=aliases,
    )


_MD = SkillFileName.MARKDOWN

SKILL_AGENT_DEFINITIONS: tuple[SkillAgentDefinition, ...] = (
    _define("claude", ".claude", aliases=("claude-code",)),
    _define("codex", ".agents"),
    _define("gemini", ".gemini", aliases=("gemini-cli",)),
    SkillAgentDefinition(
        id="opencode",
        project_rel_dir=os.path.join(".opencode", "skills"),
        user_rel_dir=os.path.join(".config", "opencode", "skills"),
    ),
    _define("cursor", ".cursor", SkillFileName.CURSOR),
    _define("github-copilot", ".github", _MD),
    _define("windsurf", ".windsurf", _MD),
    _define("antigravity", ".antigravity"),
    _define("amp", ".amp"),
    _define("clawdbot", ".clawdbot"),
    _define("factory", ".factory", aliases=("droid",)),
    _define("goose", ".goose"),
    _define("kilo-code", ".kilocode"),
    _define("kiro-cli", ".kiro"),
    _define("roo-code", ".roo"),
    _define("trae", ".trae"),
    _define("cline", ".cline"),
    _define("codebuddy", ".codebuddy"),
    _define("commandcode", ".commandcode"),
    _define("continue", ".continue"),
    _define("crush", ".crush"),
    _define("mcpjam", ".mcpjam"),
    _define("mux", ".mux"),
    _define("neovate", ".neovate"),
    _define("openhands", ".openhands"),
    _define("pi", ".pi"),
    _define("qoder", ".qoder"),
    _define("qwen", ".qwen"),
    _define("vercel", ".vercel"),
    _define("zencoder", ".zencoder"),
    _define("devin", ".devin", _MD),
    _define("aider", ".aider"),
    _define("sourcegraph-cody", ".cody"),
    _define("amazon-q", ".amazonq"),
    _define("augment-code", ".augment"),
    _define("replit-agent", ".replit", _MD),
    _define("bolt", ".bolt", _MD),
    _define("lovable", ".lovable", _MD),
    _define("tabby", ".tabby"),
    _define("tabnine", ".tabnine"),
    _define("codegpt", ".codegpt"),
    _define("playcode-agent", ".playcode", _MD),
    SkillAgentDefinition(id="universal", project_rel_dir="skills", user_rel_dir="skills"),
)
"""Every supported agent, in declaration order."""


def validate_skill_name(name: str) -> None:
    """Raise :class:`SkillError` unless *name* is lowercase words joined by single hyphens."""
    if not _SKILL_NAME_PATTERN.fullmatch(name):
        raise SkillError(
            f'invalid skill name "{name}": use lowercase letters, numbers, '
            "and single hyphens only"
        )


def find_skill_agent_definition(agent: str) -> SkillAgentDefinition | None:
    """Return the definition whose ID or alias is *agent*, or ``None``."""
    for definition in SKILL_AGENT_DEFINITIONS:
        if definition.id == agent or agent in definition.aliases:
            return definition
    return None


def valid_skill_agent_names() -> list[str]:
    """Return every accepted agent ID and alias, sorted."""
    names = []
    for definition in SKILL_AGENT_DEFINITIONS:
        names.append(definition.id)
        names.extend(definition.aliases)
    return sorted(names)


def resolve_skill_agents(agent_type: str) -> list[str]:
    """Return the agent IDs selected by *agent_type* (an ID, an alias or ``all``)."""
    if agent_type == "all":
        return [definition.id for definition in SKILL_AGENT_DEFINITIONS]

    definition = find_skill_agent_definition(agent_type)
    if definition is None:
        raise SkillError(
            f'invalid agent "{agent_type}": must be one of '
            f"{', '.join(valid_skill_agent_names())}, or all"
        )
    return [definition.id]


def resolve_skill_base_dir(scope: str) -> str:
    """Return the working directory for ``project`` or the home directory for ``user``."""
    if scope == "project":
        try:
            return os.getcwd()
        except OSError as exc:
            raise SkillError(f"getwd: {exc}") from exc
    if scope == "user":
        try:
            return str(Path.home())
        except (RuntimeError, KeyError) as exc:
            raise SkillError(f"user home: {exc}") from exc
    raise SkillError(f'invalid scope "{scope}": must be project or user')


def skill_file_relative_path(file_name: SkillFileName, skill_name: str) -> str:
    """Return the skill's path relative to the agent's skill directory."""
    if file_name in (SkillFileName.MARKDOWN, SkillFileName.CURSOR):
        return skill_name + file_name.value
    return os.path.join(skill_name, SkillFileName.STANDARD.value)


def skill_target_path(scope: str, agent: str, name: str) -> str:
    """Return the full path of skill *name* for *agent* in *scope*."""
    base_dir = resolve_skill_base_dir(scope)

    definition = find_skill_agent_definition(agent)
    if definition is None:
        raise SkillError(f'unsupported agent "{agent}"')

    rel_dir = definition.user_rel_dir if scope == "user" else definition.project_rel_dir
    return os.path.join(base_dir, rel_dir, skill_file_relative_path(definition.file_name, name))


def resolve_skill_targets_for_agents(scope: str, agents, name: str) -> list[SkillTarget]:
    """Return the targets of skill *name* for *agents*, sorted by agent."""
    targets = [
        SkillTarget(agent=agent, path=skill_target_path(scope, agent, name)) for agent in agents
    ]
    targets.sort(key=lambda target: target.agent)
    return targets


def resolve_skill_targets(scope: str, agent_type: str, name: str) -> list[SkillTarget]:
    """Return the targets of skill *name* for the agents selected by *agent_type*."""
    return resolve_skill_targets_for_agents(scope, resolve_skill_agents(agent_type), name)


def resolve_template_skill_targets(scope: str, name: str) -> list[SkillTarget]:
    """Return the targets of a template skill, which go to a fixed set of agents."""
    return resolve_skill_targets_for_agents(scope, TEMPLATE_SKILL_AGENTS, name)


def write_skill_file(path: str, content: str) -> None:
    """Write *content* to a new file at *path*, creating parent directories."""
    try:
        os.stat(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        raise SkillError(f"stat SKILL.md: {exc}") from exc
    else:
        raise SkillError(f"SKILL.md already exists: {path}")

    try:
        os.makedirs(os.path.dirname(path), mode=0o755, exist_ok=True)
    except OSError as exc:
        raise SkillError(f"mkdir skill dir: {exc}") from exc

    try:
        with open(path, "w", encoding="utf-8", newline="") as handle:
            handle.write(content)
    except OSError as exc:
        raise SkillError(f"write SKILL.md: {exc}") from exc


def title_words(text: str) -> str:
    """Capitalise each whitespace-separated word and join them with single spaces."""
    return " ".join(word[0].upper() + word[1:].lower() for word in text.split())


def render_skill_content(name: str, description: str) -> str:
    """Return the Markdown body of a new skill file."""
    body_title = title_words(name.replace("-", " "))
    return (
        "---\n"
        f"name: {name}\n"
        f"description: {description}\n"
        "---\n"
        "\n"
        f"# {body_title}\n"
        "\n"
        "Add your skill instructions here.\n"
    )


def create_skill(
    name: str,
    scope: str = "project",
    agent_type: str = "all",
    description: str = "",
) -> SkillCreation:
    """Validate *name*, then write the skill file for every selected agent."""
    validate_skill_name(name)
    targets = resolve_skill_targets(scope, agent_type, name)
    description = description or DEFAULT_SKILL_DESCRIPTION

    content = render_skill_content(name, description)
    for target in targets:
        try:
            write_skill_file(target.path, content)
        except SkillError as exc:
            raise SkillError(f"write {target.agent} skill: {exc}") from exc

    return SkillCreation(name=name, scope=scope, description=description, targets=targets)