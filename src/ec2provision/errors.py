"""Errors raised while validating EC2 instance configuration.

All of these are fatal: they abort stack construction and are reported
by the CDK app entry point.
"""


class ConfigurationError(ValueError):
    """Base class for configuration problems."""


class MissingConfiguration(ConfigurationError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Required variable {key} is not set or is blank")


class InvalidConfiguration(ConfigurationError):
    pass


class RegionMismatch(ConfigurationError):
    def __init__(self, availability_zone: str, region: str):
        self.availability_zone = availability_zone
        self.region = region
        super().__init__(
            f"SUBNET_AZ ({availability_zone}) does not belong to"
            f" the stack region ({region})"
        )


class EmptyCollection(ConfigurationError):
    def __init__(self, name: str, message: str | None = None):
        self.name = name
        super().__init__(message or f"{name} must contain at least one value")
