"""Tests for thread safety of Container."""

import asyncio
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

import pytest

from stackwire.container import Container
from stackwire.exceptions import CircularDependencyError, ConstructionFailureError
from stackwire.providers import Lifetime


class SlowService:
    instance_count = 0
    count_lock = threading.Lock()

    def __init__(self) -> None:
        with SlowService.count_lock:
            SlowService.instance_count += 1
        # Keeps the construction lock held while other threads arrive.
        time.sleep(0.01)


@pytest.fixture(autouse=True)
def _reset_slow_service_counter() -> None:
    SlowService.instance_count = 0


class TestConcurrentResolution:
    def test_concurrent_singleton_resolution_calls_factory_once(
        self,
        container: Container,
    ) -> None:
        container.register("Shared", lifetime=Lifetime.SINGLETON, factory=SlowService)
        barrier = threading.Barrier(16)

        def resolve_shared() -> SlowService:
            barrier.wait()
            return container.resolve("Shared")

        with ThreadPoolExecutor(max_workers=16) as executor:
            futures = [executor.submit(resolve_shared) for _ in range(16)]
            results = [future.result() for future in as_completed(futures)]

        assert SlowService.instance_count == 1
        assert all(result is results[0] for result in results)

    def test_concurrent_transient_resolution_different_instances(
        self,
        container: Container,
    ) -> None:
        container.register("Service", factory=object)
        results: list[object] = []
        errors: list[Exception] = []

        def resolve_service() -> None:
            try:
                results.append(container.resolve("Service"))
            except Exception as e:  # noqa: BLE001
                errors.append(e)

        threads = [threading.Thread(target=resolve_service) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert not errors
        assert len(results) == 10
        assert len({id(r) for r in results}) == 10

    def test_concurrent_graph_shares_singleton_dependency(self, container: Container) -> None:
        container.register("slow", lifetime=Lifetime.SINGLETON, factory=SlowService)
        container.register("consumer", ["slow"], factory=lambda slow: slow)

        with ThreadPoolExecutor(max_workers=8) as executor:
            results = list(executor.map(lambda _: container.resolve("consumer"), range(32)))

        assert SlowService.instance_count == 1
        assert all(result is results[0] for result in results)

    def test_concurrent_resolution_from_event_loop_executor_calls_factory_once(self, container: Container) -> None:
        container.register("Shared", lifetime=Lifetime.SINGLETON, factory=SlowService)

        async def resolve_all() -> list[SlowService]:
            loop = asyncio.get_running_loop()
            return list(
                await asyncio.gather(
                    *(loop.run_in_executor(None, container.resolve, "Shared") for _ in range(8)),
                ),
            )

        results = asyncio.run(resolve_all())

        assert SlowService.instance_count == 1
        assert all(result is results[0] for result in results)

    def test_failed_singleton_construction_releases_lock(self, container: Container) -> None:
        attempts: list[int] = []

        def flaky() -> object:
            attempts.append(1)
            if len(attempts) == 1:
                msg = "first attempt fails"
                raise RuntimeError(msg)
            return object()

        container.register("flaky", lifetime=Lifetime.SINGLETON, factory=flaky)

        with pytest.raises(ConstructionFailureError):
            container.resolve("flaky")

        with ThreadPoolExecutor(max_workers=4) as executor:
            results = list(executor.map(lambda _: container.resolve("flaky"), range(8)))

        assert len(attempts) == 2
        assert all(result is results[0] for result in results)


class TestResolutionStackIsolation:
    def test_parallel_resolution_of_shared_transient_is_not_a_cycle(
        self,
        container: Container,
    ) -> None:
        """Each thread owns its own stack, so overlapping names are not cycles."""
        container.register("leaf", factory=lambda: time.sleep(0.005) or object())
        container.register("mid", ["leaf"], factory=lambda leaf: leaf)
        container.register("root", ["mid", "leaf"], factory=lambda mid, leaf: (mid, leaf))

        with ThreadPoolExecutor(max_workers=8) as executor:
            futures = [executor.submit(container.resolve, "root") for _ in range(32)]
            for future in as_completed(futures):
                future.result()

    def test_cycle_detected_in_every_thread(self, container: Container) -> None:
        container.register("X", ["Y"], factory=lambda y: y)
        container.register("Y", ["X"], factory=lambda x: x)
        errors: list[Exception] = []

        def resolve_cycle() -> None:
            try:
                container.resolve("X")
            except CircularDependencyError as e:
                errors.append(e)

        threads = [threading.Thread(target=resolve_cycle) for _ in range(5)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(errors) == 5
        assert all(error.path == ("X", "Y", "X") for error in errors)

    @staticmethod
    def _resolve_both_ends(container: Container) -> tuple[list[threading.Thread], list[Exception]]:
        errors: list[Exception] = []
        barrier = threading.Barrier(2)

        def resolve(name: str) -> None:
            barrier.wait()
            try:
                container.resolve(name)
            except CircularDependencyError as e:
                errors.append(e)

        threads = [
            threading.Thread(target=resolve, args=(name,), daemon=True) for name in ("A", "B")
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(timeout=3)
        return threads, errors

    def test_singleton_cycle_entered_from_both_ends_does_not_deadlock(
        self,
        container: Container,
    ) -> None:
        container.register("gate", factory=lambda: time.sleep(0.2))
        container.register("A", ["gate", "B"], Lifetime.SINGLETON, factory=lambda gate, b: b)
        container.register("B", ["gate", "A"], Lifetime.SINGLETON, factory=lambda gate, a: a)

        threads, errors = self._resolve_both_ends(container)

        assert not any(t.is_alive() for t in threads)
        assert sorted(error.path for error in errors) == [("A", "B", "A"), ("B", "A", "B")]

    def test_cycle_added_by_reregistration_does_not_deadlock(self, container: Container) -> None:
        container.register("gate", factory=lambda: time.sleep(0.2))
        container.register("A", ["gate", "B"], Lifetime.SINGLETON, factory=lambda gate, b: b)
        container.register("B", ["gate"], factory=lambda gate: 1 / 0)
        with pytest.raises(ConstructionFailureError):
            container.resolve("A")
        container.register("B", ["gate", "A"], Lifetime.SINGLETON, factory=lambda gate, a: a)

        threads, errors = self._resolve_both_ends(container)

        assert not any(t.is_alive() for t in threads)
        assert len(errors) == 2

class TestConcurrentRegistration:
    def test_concurrent_registration_no_corruption(self, container: Container) -> None:
        def register_service(i: int) -> None:
            container.register(f"service_{i}", factory=lambda: i)

        with ThreadPoolExecutor(max_workers=10) as executor:
            list(executor.map(register_service, range(50)))

        assert all(f"service_{i}" in container for i in range(50))

    def test_concurrent_registration_and_resolution(self, container: Container) -> None:
        container.register("base", lifetime=Lifetime.SINGLETON, factory=object)

        def register_and_resolve(i: int) -> object:
            container.register(f"local_{i}", ["base"], factory=lambda base: base)
            return container.resolve(f"local_{i}")

        with ThreadPoolExecutor(max_workers=10) as executor:
            results = list(executor.map(register_and_resolve, range(40)))

        assert all(result is results[0] for result in results)
