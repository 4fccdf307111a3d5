"""Taskboard: weekly task board with capacity rules and plain-text sync."""
