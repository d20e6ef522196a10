"""Taskboard: task approval workflow and role-based permission API."""
