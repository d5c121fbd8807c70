from __future__ import annotations

import inspect
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Annotated, Any, cast, get_args, get_origin, get_type_hints

import pytest

from stackwire.container import Container
from stackwire.markers import Service

_STACKWIRE_CONTAINER_ATTR = "_stackwire_container"
_STACKWIRE_INJECTED_PARAMETERS_ATTR = "__stackwire_pytest_injected_parameters__"


@dataclass(frozen=True, slots=True)
class InjectedParameter:
    """A test parameter filled from the container instead of a fixture."""

    parameter_name: str
    service_name: str


def find_injected_parameters(func: Callable[..., Any]) -> tuple[InjectedParameter, ...]:
    """Return parameters annotated ``Annotated[T, Service("name")]``, in signature order.

    Annotations that cannot be evaluated are treated as plain fixture requests.
    """
    try:
        hints = get_type_hints(func, include_extras=True)
    except (NameError, TypeError, AttributeError):
        return ()

    injected: list[InjectedParameter] = []
    for parameter in inspect.signature(func).parameters.values():
        annotation = hints.get(parameter.name)
        if get_origin(annotation) is not Annotated:
            continue
        for metadata in get_args(annotation)[1:]:
            if isinstance(metadata, Service):
                injected.append(InjectedParameter(parameter.name, metadata.name))
                break
    return tuple(injected)


@pytest.fixture()
def stackwire_container() -> Container:
    """Create a per-test container used by the plugin.

    Override this fixture to register the services a test module needs. It is
    function-scoped, so registrations and singletons are isolated between tests
    unless the fixture scope is overridden.
    """
    return Container()


@pytest.fixture(autouse=True)
def _stackwire_state(
    request: pytest.FixtureRequest,
    stackwire_container: Container,
) -> None:
    """Store plugin state on the test node for hook access."""
    node = cast("Any", request.node)
    setattr(node, _STACKWIRE_CONTAINER_ATTR, stackwire_container)


def pytest_pycollect_makeitem(
    collector: Any,
    name: str,
    obj: object,
) -> Any | None:
    """Hide ``Service``-annotated parameters from pytest fixture name matching.

    Pytest treats test function parameters as fixture names, so the public
    signature of such tests is rewritten without the injected parameters.
    """
    if not callable(obj):
        return None
    if not collector.istestfunction(obj, name):
        return None

    callable_obj = cast("Callable[..., Any]", obj)
    injected_parameters = find_injected_parameters(callable_obj)
    if not injected_parameters:
        return None

    injected_names = {parameter.parameter_name for parameter in injected_parameters}
    signature = inspect.signature(callable_obj)
    public_signature = signature.replace(
        parameters=[
            parameter
            for parameter in signature.parameters.values()
            if parameter.name not in injected_names
        ],
    )

    obj_as_any = cast("Any", obj)
    obj_as_any.__dict__[_STACKWIRE_INJECTED_PARAMETERS_ATTR] = injected_parameters
    obj_as_any.__signature__ = public_signature
    return None


@pytest.hookimpl(hookwrapper=True, tryfirst=True)
def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> Iterator[None]:
    """Resolve ``Service``-annotated parameters from the test's container.

    If the test has no injected parameters or no container state is attached to
    the node, this hook is a no-op.
    """
    original_callable = cast("Callable[..., Any]", pyfuncitem.obj)
    injected_parameters = cast(
        "tuple[InjectedParameter, ...] | None",
        getattr(original_callable, _STACKWIRE_INJECTED_PARAMETERS_ATTR, None),
    )
    if not injected_parameters:
        yield
        return

    container = cast("Container | None", getattr(pyfuncitem, _STACKWIRE_CONTAINER_ATTR, None))
    if container is None:
        yield
        return

    def _call_with_services(*args: Any, **kwargs: Any) -> Any:
        for parameter in injected_parameters:
            kwargs[parameter.parameter_name] = container.resolve(parameter.service_name)
        return original_callable(*args, **kwargs)

    pyfuncitem.obj = _call_with_services
    try:
        yield
    finally:
        pyfuncitem.obj = original_callable
