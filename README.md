# agentcom

agentcom helps several AI coding agents on the same machine work together.
It keeps a registry of agents, the messages they exchange and the tasks they
hand to one another in a single SQLite database, and it writes skill files in
the places each coding agent looks for them.

It needs nothing beyond the Python standard library.

## Installation

```
pip install .
```

## Where data lives

`agentcom.config.load()` resolves the paths: by default everything is kept
under `~/.agentcom/`, with the database at `agentcom.db` and a `sockets/`
subdirectory. Set `AGENTCOM_HOME` to use a different directory.
`Config.ensure_dirs()` creates the base and sockets directories.

A project can be named in a `.agentcom.json` file. `load_project_config(start_dir)`
looks for it in the given directory and up to ten of its parents;
`resolve_project(explicit, start_dir)` prefers an explicitly given name.
Project names are lowercase letters, digits, hyphens and underscores, at most
64 characters; the empty name means "no project".

## Command line

Show version information:

```
agentcom version
```

Create a skill file for every supported coding agent in the current directory:

```
agentcom skill create my-skill
```

Limit it to one agent, place it in your home directory instead, and give it a
description:

```
agentcom skill create my-skill --agent cursor --scope user --description "Review pull requests"
```

Put `--json` before the command to get JSON output instead of text:

```
agentcom --json skill create my-skill --agent claude
```

Skill names use lowercase letters, digits and single hyphens. Agents may be
named by identifier or alias (for example `claude` or `claude-code`); `all`, the
default, writes one file per supported agent. An existing skill file is never
overwritten. On failure the command prints `Error: ...` and exits with status 1.

## Library use

```python
from agentcom.config import load
from agentcom.database import open_database
from agentcom.agents import Agent, AgentStore
from agentcom.status import collect_status, render_status_table

config = load()
config.ensure_dirs()

with open_database(config.db_path) as database:
    database.migrate()

    agents = AgentStore(database)
    planner = Agent(name="planner", type="planner", project="my-app", status="alive")
    agents.insert(planner)

    summary = collect_status(database, "my-app")
    print(render_status_table(summary))
```

Other building blocks:

- `agentcom.database` — `open_database`, `open_memory`, and `Database` with
  `migrate()` and `schema_version()`.
- `agentcom.project` — `write_project_config`, `load_project_config`,
  `resolve_project`, `validate_project_name`.
- `agentcom.agents` — `AgentStore` to insert, update, delete, find and list
  agents and record heartbeats.
- `agentcom.messages` — `MessageStore` for direct and broadcast messages,
  delivery and read tracking, and correlation lookups.
- `agentcom.tasks` — `TaskStore` for task records.
- `agentcom.taskops` — `create_task`, `list_tasks`, `update_task`,
  `delegate_task` and `render_task_table`, resolving agents by name or ID.
- `agentcom.status` — `collect_status` and `render_status_table`.
- `agentcom.skills` — `create_skill`, `skill_target_path` and the table of
  supported agents.

Lookups that find nothing raise `AgentNotFoundError`, `MessageNotFoundError` or
`TaskNotFoundError`; registering a second agent with the same name in the same
project raises `DuplicateNameError`. Task operations report failures with
`TaskCommandError`, skill operations with `SkillError`, and invalid project
names or config files with `ProjectConfigError`.

## What it does not do

The command line offers only `version` and `skill create`. Agents, messages,
tasks and the status summary are reached through the library, not through
commands. Messages are stored and marked in the database only; nothing listens
on the sockets directory or delivers messages to running agents.

## Running the tests

```
pip install ".[test]"
pytest
```