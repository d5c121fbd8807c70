from enum import Enum


class RegistrationPolicy(str, Enum):
    """Policy for handling a second registration under the same name."""

    REPLACE = "replace"
    """Overwrite the previous definition. The last registration wins."""

    ERROR = "error"
    """Raise ``DuplicateServiceError``."""
