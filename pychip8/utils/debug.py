"""Category-gated diagnostics for the CHIP-8 interpreter.

``CHIP8_DEBUG`` holds a comma-separated list of categories, for example
``CHIP8_DEBUG=cpu,input``. ``all`` enables every category. The variable is
read on first use; tests call :func:`reload_categories` after changing it.
"""

from __future__ import annotations

import os

ENV_VARIABLE = "CHIP8_DEBUG"

_enabled: frozenset[str] | None = None


def parse_categories(value: str) -> frozenset[str]:
    return frozenset(filter(None, (name.strip().lower() for name in value.split(","))))


def _categories() -> frozenset[str]:
    global _enabled
    if _enabled is None:
        _enabled = parse_categories(os.environ.get(ENV_VARIABLE, ""))
    return _enabled


def reload_categories() -> None:
    """Forget the cached categories so the next query re-reads the environment."""

    global _enabled
    _enabled = None


def debug_enabled(category: str | None = None) -> bool:
    """Return whether ``category`` is on; with no category, whether any is."""

    enabled = _categories()
    if category is None or "all" in enabled:
        return bool(enabled)
    return category.lower() in enabled


def debug_log(category: str, message: str, *args) -> None:
    if not debug_enabled(category):
        return
    if args:
        try:
            message = message % args
        except (TypeError, ValueError):
            message = f"{message} {args!r}"
    print(f"[CHIP8][{category}] {message}")
