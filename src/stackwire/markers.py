from __future__ import annotations

from dataclasses import dataclass

from stackwire.providers import ServiceName


@dataclass(frozen=True, slots=True)
class Service:
    """Mark an annotated parameter as resolved from a container by name.

    .. code-block:: python

        def test_users(users: Annotated[UserService, Service("user_service")]) -> None: ...

    """

    name: ServiceName
