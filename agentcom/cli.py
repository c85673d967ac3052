"""Command-line entry point: version information and skill management."""

from __future__ import annotations

import argparse
import json
import platform
import sys
from collections.abc import Sequence
from importlib import metadata

from agentcom.skills import SkillError, create_skill

PROGRAM_NAME = "agentcom"
BUILD_DATE = "unknown"


def _package_version() -> str:
    try:
        return metadata.version(PROGRAM_NAME)
    except metadata.PackageNotFoundError:
        return "dev"


def version_info() -> dict[str, str]:
    """Return the version, build date, runtime version and platform."""
    return {
        "version": _package_version(),
        "buildDate": BUILD_DATE,
        "pythonVersion": platform.python_version(),
        "os": platform.system().lower() or "unknown",
        "arch": platform.machine().lower() or "unknown",
    }


def _emit_json(payload: object) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, sort_keys=True, ensure_ascii=False) + "\n")


def _run_version(args: argparse.Namespace) -> int:
    info = version_info()
    if args.json:
        _emit_json(info)
        return 0
    sys.stdout.write(
        f"{PROGRAM_NAME} {info['version']}\n"
        f"  Build Date: {info['buildDate']}\n"
        f"  Python Version: {info['pythonVersion']}\n"
        f"  OS/Arch:    {info['os']}/{info['arch']}\n"
    )
    return 0


def _run_skill_create(args: argparse.Namespace) -> int:
    creation = create_skill(
        args.name,
        scope=args.scope,
        agent_type=args.agent,
        description=args.description,
    )
    if args.json:
        _emit_json(creation.to_dict())
        return 0
    for target in creation.targets:
        sys.stdout.write(f"generated {target.agent} skill at {target.path}\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the command line."""
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME)
    parser.add_argument("--json", action="store_true", help="Output JSON")
    parser.set_defaults(handler=None, help_parser=parser)
    commands = parser.add_subparsers(dest="command")

    version = commands.add_parser("version", help="Print version information")
    version.set_defaults(handler=_run_version)

    skill = commands.add_parser("skill", help="Skill management commands")
    skill.set_defaults(handler=None, help_parser=skill)
    skill_commands = skill.add_subparsers(dest="skill_command")

    create = skill_commands.add_parser(
        "create", help="Create a skill file for an AI coding agent"
    )
    create.add_argument("name", help="Skill name")
    create.add_argument("--scope", default="project", help="Skill scope: project|user")
    create.add_argument("--agent", default="all", help="Target agent identifier or all")
    create.add_argument("--description", default="", help="Skill description")
    create.set_defaults(handler=_run_skill_create)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command line and return its exit status."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.handler is None:
        args.help_parser.print_help(sys.stdout)
        return 0
    try:
        return args.handler(args)
    except (SkillError, OSError) as exc:
        sys.stderr.write(f"Error: {exc}\n")
        return 1


if __name__ == "__main__":
    sys.exit(main())