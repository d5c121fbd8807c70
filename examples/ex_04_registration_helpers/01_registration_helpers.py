"""Registration helpers: decorators, prebuilt instances, and eager validation.

``validate`` walks the whole graph without running any factory, which is handy
at process start-up.
"""

from __future__ import annotations

from stackwire import Container, Lifetime, add_instance, provide

container = Container()
add_instance(container, "dsn", "sqlite:///:memory:")


@provide(container, "database", dependencies=["dsn"], lifetime=Lifetime.SINGLETON)
class Database:
    def __init__(self, dsn: str) -> None:
        self.dsn = dsn


@provide(container, "repository", dependencies=["database"])
def make_repository(database: Database) -> dict[str, Database]:
    return {"database": database}


def main() -> None:
    container.validate()
    print("graph_valid=True")  # => graph_valid=True

    repository = container.resolve("repository")
    print(f"dsn={repository['database'].dsn}")  # => dsn=sqlite:///:memory:
    print(f"services={'repository' in container}")  # => services=True


if __name__ == "__main__":
    main()
