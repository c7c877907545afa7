"""Dockmaster: a JWT-protected REST API for managing a container runtime through its CLI."""

__version__ = "0.1.0"
