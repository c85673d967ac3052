"""Coordination store for AI coding agents: agents, messages, tasks and skill files."""

__version__ = "0.1.0"