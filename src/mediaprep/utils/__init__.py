"""Shared utilities (logging, language codes)."""
