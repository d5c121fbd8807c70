from stackwire.integrations.pytest_plugin.plugin import (
    InjectedParameter,
    _stackwire_state,
    find_injected_parameters,
    pytest_pycollect_makeitem,
    pytest_pyfunc_call,
    stackwire_container,
)

__all__ = [
    "InjectedParameter",
    "_stackwire_state",
    "find_injected_parameters",
    "pytest_pycollect_makeitem",
    "pytest_pyfunc_call",
    "stackwire_container",
]
