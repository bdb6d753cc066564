"""Shared utilities: logging, paths, settings and file locking."""
