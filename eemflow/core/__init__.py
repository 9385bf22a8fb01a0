"""Shared data model, configuration, errors and logging setup."""
