"""Shared types, errors and helpers used across the router packages."""
