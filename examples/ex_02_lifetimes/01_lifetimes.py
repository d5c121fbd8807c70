"""Lifetimes: singletons are shared, transients are rebuilt on every resolution.

A transient requested twice inside one graph is still built twice.
"""

from __future__ import annotations

from stackwire import Container, Lifetime


class RequestId:
    counter = 0

    def __init__(self) -> None:
        RequestId.counter += 1
        self.value = RequestId.counter


class Config:
    pass


def main() -> None:
    container = Container()
    container.register("config", lifetime=Lifetime.SINGLETON, factory=Config)
    container.register("request_id", lifetime=Lifetime.TRANSIENT, factory=RequestId)
    container.register(
        "handler",
        ["config", "config", "request_id", "request_id"],
        factory=lambda c1, c2, r1, r2: (c1, c2, r1, r2),
    )

    c1, c2, r1, r2 = container.resolve("handler")
    print(f"singleton_shared={c1 is c2}")  # => singleton_shared=True
    print(f"transient_shared={r1 is r2}")  # => transient_shared=False
    print(f"request_ids={r1.value},{r2.value}")  # => request_ids=1,2

    third = container.resolve("request_id")
    print(f"next_request_id={third.value}")  # => next_request_id=3


if __name__ == "__main__":
    main()
