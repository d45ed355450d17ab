"""Essence CLI commands."""
