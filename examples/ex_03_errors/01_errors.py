"""Errors: every failure is a typed ``StackwireError`` naming the culprit.

Cycles report the full chain, missing services report the missing name, and
factory failures keep the original exception as ``cause``.
"""

from __future__ import annotations

from stackwire import (
    CircularDependencyError,
    ConstructionFailureError,
    Container,
    ServiceNotFoundError,
)


def main() -> None:
    container = Container()
    container.register("A", ["B"], factory=lambda b: b)
    container.register("B", ["C"], factory=lambda c: c)
    container.register("C", ["A"], factory=lambda a: a)

    try:
        container.resolve("A")
    except CircularDependencyError as error:
        print(f"cycle={' -> '.join(error.path)}")  # => cycle=A -> B -> C -> A

    try:
        container.resolve("Unregistered")
    except ServiceNotFoundError as error:
        print(f"missing={error.name}")  # => missing=Unregistered

    def connect() -> object:
        msg = "connection refused"
        raise ConnectionError(msg)

    container.register("database", lifetime="singleton", factory=connect)
    try:
        container.resolve("database")
    except ConstructionFailureError as error:
        print(f"failed={error.name} cause={error.cause!r}")  # => failed=database cause=ConnectionError('connection refused')


if __name__ == "__main__":
    main()
