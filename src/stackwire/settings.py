from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from stackwire.lock_mode import LockMode
from stackwire.policies import RegistrationPolicy


class StackwireSettings(BaseSettings):
    """Container configuration read from ``STACKWIRE_*`` environment variables."""

    model_config = SettingsConfigDict(env_prefix="STACKWIRE_", frozen=True)

    lock_mode: LockMode = LockMode.THREAD
    """``STACKWIRE_LOCK_MODE``: ``thread`` or ``none``."""

    registration_policy: RegistrationPolicy = RegistrationPolicy.REPLACE
    """``STACKWIRE_REGISTRATION_POLICY``: ``replace`` or ``error``."""
