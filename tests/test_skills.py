import os

import pytest

from agentcom.skills import (
    DEFAULT_SKILL_DESCRIPTION,
    SKILL_AGENT_DEFINITIONS,
    SkillError,
    SkillFileName,
    SkillTarget,
    create_skill,
    find_skill_agent_definition,
    render_skill_content,
    resolve_skill_agents,
    resolve_skill_base_dir,
    resolve_skill_targets,
    resolve_template_skill_targets,
    skill_file_relative_path,
    skill_target_path,
    title_words,
    valid_skill_agent_names,
    validate_skill_name,
    write_skill_file,
)


@pytest.mark.parametrize("name", ["my-skill", "skill-2"])
def test_validate_skill_name_accepts(name):
    assert validate_skill_name(name) is None


@pytest.mark.parametrize("name", ["My-skill", "my_skill", "my--skill", "-skill", "skill-", ""])
def test_validate_skill_name_rejects(name):
    with pytest.raises(SkillError):
        validate_skill_name(name)


@pytest.fixture
def dirs(tmp_path, monkeypatch):
    project_dir = tmp_path / "project"
    home_dir = tmp_path / "home"
    project_dir.mkdir()
    home_dir.mkdir()
    monkeypatch.chdir(project_dir)
    monkeypatch.setenv("HOME", str(home_dir))
    return os.getcwd(), str(home_dir)


@pytest.mark.parametrize(
    "scope, agent, parts",
    [
        ("project", "claude", (".claude", "skills", "my-skill", "SKILL.md")),
        ("project", "codex", (".agents", "skills", "my-skill", "SKILL.md")),
        ("project", "gemini", (".gemini", "skills", "my-skill", "SKILL.md")),
        ("project", "opencode", (".opencode", "skills", "my-skill", "SKILL.md")),
        ("project", "claude-code", (".claude", "skills", "my-skill", "SKILL.md")),
        ("project", "cursor", (".cursor", "skills", "my-skill.mdc")),
        ("project", "github-copilot", (".github", "skills", "my-skill.md")),
        ("project", "universal", ("skills", "my-skill", "SKILL.md")),
        ("user", "claude", (".claude", "skills", "my-skill", "SKILL.md")),
        ("user", "codex", (".agents", "skills", "my-skill", "SKILL.md")),
        ("user", "gemini", (".gemini", "skills", "my-skill", "SKILL.md")),
        ("user", "opencode", (".config", "opencode", "skills", "my-skill", "SKILL.md")),
        ("user", "devin", (".devin", "skills", "my-skill.md")),
        ("user", "droid", (".factory", "skills", "my-skill", "SKILL.md")),
    ],
)
def test_skill_target_path(dirs, scope, agent, parts):
    project_dir, home_dir = dirs
    base = project_dir if scope == "project" else home_dir
    assert skill_target_path(scope, agent, "my-skill") == os.path.join(base, *parts)


def test_skill_target_path_invalid_scope(dirs):
    with pytest.raises(SkillError, match="invalid scope"):
        skill_target_path("global", "claude", "my-skill")


def test_skill_target_path_unsupported_agent(dirs):
    with pytest.raises(SkillError, match="unsupported agent"):
        skill_target_path("project", "nope", "my-skill")


def test_resolve_skill_base_dir(dirs):
    project_dir, home_dir = dirs
    assert resolve_skill_base_dir("project") == project_dir
    assert resolve_skill_base_dir("user") == home_dir


def test_resolve_skill_agents_all():
    agents = resolve_skill_agents("all")
    assert len(agents) == len(SKILL_AGENT_DEFINITIONS)
    assert agents[0] == "claude"


@pytest.mark.parametrize(
    "given, expected",
    [("claude-code", "claude"), ("gemini-cli", "gemini"), ("droid", "factory"), ("cursor", "cursor")],
)
def test_resolve_skill_agents_single(given, expected):
    assert resolve_skill_agents(given) == [expected]


def test_resolve_skill_agents_missing():
    with pytest.raises(SkillError, match="invalid agent"):
        resolve_skill_agents("missing-agent")


def test_find_skill_agent_definition():
    definition = find_skill_agent_definition("droid")
    assert definition.id == "factory"
    assert find_skill_agent_definition("missing-agent") is None


def test_valid_skill_agent_names_sorted_with_aliases():
    names = valid_skill_agent_names()
    assert names == sorted(names)
    assert {"claude-code", "gemini-cli", "droid", "universal"} <= set(names)
    assert len(names) == len(SKILL_AGENT_DEFINITIONS) + 3


def test_skill_file_relative_path():
    assert skill_file_relative_path(SkillFileName.CURSOR, "x") == "x.mdc"
    assert skill_file_relative_path(SkillFileName.MARKDOWN, "x") == "x.md"
    assert skill_file_relative_path(SkillFileName.STANDARD, "x") == os.path.join("x", "SKILL.md")


def test_resolve_template_skill_targets_sorted(dirs):
    project_dir, _ = dirs
    targets = resolve_template_skill_targets("project", "demo")
    assert [t.agent for t in targets] == ["claude", "codex", "gemini", "opencode"]
    assert targets[1].path == os.path.join(project_dir, ".agents", "skills", "demo", "SKILL.md")


def test_resolve_skill_targets_sorted_by_agent(dirs):
    targets = resolve_skill_targets("project", "all", "demo")
    agents = [t.agent for t in targets]
    assert agents == sorted(agents)
    assert len(agents) == len(SKILL_AGENT_DEFINITIONS)


def test_write_skill_file(tmp_path):
    path = str(tmp_path / ".claude" / "skills" / "my-skill" / "SKILL.md")
    content = render_skill_content("my-skill", DEFAULT_SKILL_DESCRIPTION)

    write_skill_file(path, content)
    with open(path, encoding="utf-8") as handle:
        assert handle.read() == content

    with pytest.raises(SkillError, match="already exists"):
        write_skill_file(path, content)


def test_render_skill_content():
    assert render_skill_content("my-skill", "Does things") == (
        "---\nname: my-skill\ndescription: Does things\n---\n\n"
        "# My Skill\n\nAdd your skill instructions here.\n"
    )


@pytest.mark.parametrize(
    "text, expected",
    [("my skill", "My Skill"), ("hELLO   wORLD", "Hello World"), ("", ""), ("a", "A")],
)
def test_title_words(text, expected):
    assert title_words(text) == expected


def test_create_skill_cursor_project(dirs):
    project_dir, _ = dirs
    result = create_skill("demo-skill", "project", "cursor", "")
    data = result.to_dict()
    assert data["name"] == "demo-skill"
    assert data["scope"] == "project"
    assert data["description"] == DEFAULT_SKILL_DESCRIPTION
    expected_path = os.path.join(project_dir, ".cursor", "skills", "demo-skill.mdc")
    assert data["targets"] == [{"agent": "cursor", "path": expected_path}]
    with open(expected_path, encoding="utf-8") as handle:
        assert "name: demo-skill" in handle.read()


def test_create_skill_custom_description(dirs):
    result = create_skill("demo", "user", "claude", "Custom text")
    assert result.description == "Custom text"
    with open(result.targets[0].path, encoding="utf-8") as handle:
        assert "description: Custom text" in handle.read()


def test_create_skill_all_agents_writes_every_file(dirs):
    result = create_skill("demo", "project", "all", "")
    assert len(result.targets) == len(SKILL_AGENT_DEFINITIONS)
    assert all(os.path.isfile(target.path) for target in result.targets)


def test_create_skill_twice_fails(dirs):
    create_skill("demo", "project", "codex", "")
    with pytest.raises(SkillError, match="write codex skill"):
        create_skill("demo", "project", "codex", "")


def test_create_skill_rejects_invalid_name(dirs):
    with pytest.raises(SkillError, match="invalid skill name"):
        create_skill("Bad_Name", "project", "claude", "")


def test_skill_target_to_dict():
    assert SkillTarget(agent="amp", path="/x").to_dict() == {"agent": "amp", "path": "/x"}