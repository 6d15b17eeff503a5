"""Shared validation and performance helpers."""
