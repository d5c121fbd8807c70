from __future__ import annotations

import importlib
import warnings
from typing import Any

from stackwire.container import Container
from stackwire.exceptions import InvalidRegistrationError
from stackwire.providers import Lifetime, ServiceName

_PYDANTIC_V1_WARNING_PATTERN = (
    r"Core Pydantic V1 functionality isn't compatible with Python 3\.14 or greater\."
)


def _load_pydantic_settings_base() -> type[Any] | None:
    return _load_base_settings("pydantic_settings")


def _load_pydantic_v1_base() -> type[Any] | None:
    with warnings.catch_warnings():
        warnings.filterwarnings(
            "ignore",
            message=_PYDANTIC_V1_WARNING_PATTERN,
            category=UserWarning,
        )
        return _load_base_settings("pydantic.v1")


def _load_base_settings(module_name: str) -> type[Any] | None:
    try:
        module = importlib.import_module(module_name)
    except ImportError:
        return None
    base_settings = getattr(module, "BaseSettings", None)
    if isinstance(base_settings, type):
        return base_settings
    return None


def _build_settings_bases() -> tuple[type[Any], ...]:
    bases: list[type[Any]] = []
    for candidate in (_load_pydantic_settings_base(), _load_pydantic_v1_base()):
        if candidate is not None and candidate not in bases:
            bases.append(candidate)
    return tuple(bases)


SETTINGS_BASES: tuple[type[Any], ...] = _build_settings_bases()


def is_pydantic_settings_subclass(candidate: object) -> bool:
    """Return whether ``candidate`` is a supported Pydantic settings model class.

    Both ``pydantic_settings.BaseSettings`` and the legacy
    ``pydantic.v1.BaseSettings`` are recognized when importable.
    """
    if not isinstance(candidate, type):
        return False
    try:
        return any(issubclass(candidate, base) for base in SETTINGS_BASES)
    except TypeError:
        return False


def add_settings(container: Container, name: ServiceName, settings_cls: type[Any]) -> None:
    """Register a settings model as a dependency-free singleton.

    The model is instantiated on first resolution, so environment variables are
    read lazily and only once per container.

    Raises:
        InvalidRegistrationError: If ``settings_cls`` is not a settings model.

    """
    if not is_pydantic_settings_subclass(settings_cls):
        msg = f"{settings_cls!r} is not a pydantic-settings BaseSettings subclass."
        raise InvalidRegistrationError(msg)

    def _load_settings() -> Any:
        # Required fields may come from the environment, so the model signature is not checked.
        return settings_cls()

    container.register(name, (), Lifetime.SINGLETON, factory=_load_settings)


__all__ = [
    "SETTINGS_BASES",
    "add_settings",
    "is_pydantic_settings_subclass",
]
