"""API Playground backend: assemble, send and inspect HTTP requests."""

__version__ = "0.4.0"
