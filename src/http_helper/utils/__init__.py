"""Utilities for the HTTP helper."""
