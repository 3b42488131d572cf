from __future__ import annotations

import importlib
import inspect
from typing import Any


def _load_settings_base() -> type[Any] | None:
    try:
        module = importlib.import_module("pydantic_settings")
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


SETTINGS_BASE: type[Any] | None = _load_settings_base()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether a class is a ``pydantic_settings.BaseSettings`` model.

    If ``pydantic-settings`` is not installed, this function returns ``False``
    for every candidate, so ``ContainerBuilder.register_settings`` rejects
    the registration instead of failing at import time.

    Args:
        candidate: Object to test.

    """
    if SETTINGS_BASE is None or not inspect.isclass(candidate):
        return False
    return issubclass(candidate, SETTINGS_BASE) and candidate is not SETTINGS_BASE


__all__ = ["SETTINGS_BASE", "is_pydantic_settings_subclass"]
