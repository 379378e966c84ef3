"""Shared helpers: session logger and uncaught-exception hook."""
