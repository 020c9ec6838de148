"""Shared helpers (logging, paths) for the ditaa renderer server."""
