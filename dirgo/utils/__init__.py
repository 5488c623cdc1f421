"""Filesystem, TOML and clipboard helpers."""
