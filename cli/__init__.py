"""Command-line helpers for sending test reports to the weather bridge."""

from importlib import import_module
from types import ModuleType


def __getattr__(name: str) -> ModuleType:
    if name == "app":
        return import_module("cli.app")
    raise AttributeError(name)

# ``cli.app`` must keep resolving to the module, not the Typer instance;
# tests patch ``cli.app.ApiClient``.

__all__ = []
