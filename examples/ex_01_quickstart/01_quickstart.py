"""Quickstart: register named services and resolve the root of the graph.

Registration order does not matter. Dependencies are resolved left to right,
so the factories below run in a predictable sequence.
"""

from __future__ import annotations

from stackwire import Container, Lifetime


class Logger:
    def __init__(self) -> None:
        print("building Logger")  # => building Logger


class Database:
    def __init__(self) -> None:
        self.host = "localhost"
        print("building Database")  # => building Database


class UserService:
    def __init__(self, logger: Logger, database: Database) -> None:
        self.logger = logger
        self.database = database
        print("building UserService")  # => building UserService


def main() -> None:
    container = Container()
    container.register(
        "user_service",
        ["logger", "database"],
        Lifetime.SINGLETON,
        factory=UserService,
    )
    container.register("logger", lifetime=Lifetime.SINGLETON, factory=Logger)
    container.register("database", lifetime=Lifetime.SINGLETON, factory=Database)

    service = container.resolve("user_service")
    print(f"db_host={service.database.host}")  # => db_host=localhost

    again = container.resolve("user_service")
    print(f"same_instance={again is service}")  # => same_instance=True


if __name__ == "__main__":
    main()
