from .errors import (
    ConfigurationError,
    EmptyCollection,
    InvalidConfiguration,
    MissingConfiguration,
    RegionMismatch,
)
from .schema import Ec2InstanceConfig, StackEnvironmentConfig

__all__ = [
    "ConfigurationError",
    "EmptyCollection",
    "InvalidConfiguration",
    "MissingConfiguration",
    "RegionMismatch",
    "Ec2InstanceConfig",
    "StackEnvironmentConfig",
]
