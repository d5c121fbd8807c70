from stackwire.container import Container
from stackwire.exceptions import (
    CircularDependencyError,
    ConstructionFailureError,
    DuplicateServiceError,
    InvalidRegistrationError,
    ServiceNotFoundError,
    StackwireError,
)
from stackwire.lock_mode import LockMode
from stackwire.markers import Service
from stackwire.policies import RegistrationPolicy
from stackwire.providers import Lifetime, ServiceDefinition
from stackwire.registration_decorators import add_instance, provide
from stackwire.settings import StackwireSettings

__all__ = [
    "CircularDependencyError",
    "ConstructionFailureError",
    "Container",
    "DuplicateServiceError",
    "InvalidRegistrationError",
    "Lifetime",
    "LockMode",
    "RegistrationPolicy",
    "Service",
    "ServiceDefinition",
    "ServiceNotFoundError",
    "StackwireError",
    "StackwireSettings",
    "add_instance",
    "provide",
]
