"""Taskboard: multi-user task tracking API."""
