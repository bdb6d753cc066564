"""Command line interface for dbregistry."""
