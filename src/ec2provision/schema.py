"""
Schema definitions for the EC2 instance stack.

This module provides the configuration records that are built once at
process start from the environment and passed to the CDK stack.
"""

import os
import re
from typing import Mapping, Optional, Tuple

import aws_cdk as cdk
from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

from ._config import optional_value, require_value
from ._tags import DEFAULT_TAG_PREFIX, extract_tags
from .errors import InvalidConfiguration, MissingConfiguration

env_prefix = "CDK_DEFAULT_"

_INSTANCE_TYPE_PATTERN = re.compile(r"^[a-z][a-z0-9-]*\.[a-z0-9][a-z0-9-]*$")


class _CdkEnvironmentSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", extra="ignore", env_prefix=env_prefix
    )
    account: Optional[str] = None
    region: Optional[str] = None


class StackEnvironmentConfig(BaseModel, frozen=True):
    """
    Account and region the stack is deployed to.

    Attributes:
        account: AWS account ID (optional, the stack is environment-agnostic otherwise)
        region: AWS region (optional, falls back to AWS_REGION)
    """

    account: Optional[str] = None
    region: Optional[str] = None

    @classmethod
    def from_settings(cls, **kwargs):
        """Create an instance from environment settings with optional overrides."""
        settings = _CdkEnvironmentSettings()

        params = {
            "account": settings.account,
            "region": settings.region,
        }
        params.update(kwargs)

        if params["region"] is None:
            params["region"] = os.getenv("AWS_REGION")

        return cls(**params)

    def to_cdk_environment(self) -> cdk.Environment:
        return cdk.Environment(account=self.account, region=self.region)


class Ec2InstanceConfig(BaseModel, frozen=True):
    """
    Configuration for the provisioned EC2 instance.

    Attributes:
        vpc_id: ID of the existing VPC
        subnet_id: ID of the existing subnet to launch into
        subnet_az: availability zone of that subnet, must be in the stack region
        instance_type: EC2 instance type, e.g. t3.micro
        role_name: name of an existing IAM role trusted by ec2.amazonaws.com
        ami_id: literal 'ami-...' id or an alias from machine_image.AMI_ALIASES
        security_group_ids: existing security group IDs, the first is the primary one
        key_name: EC2 key pair name (optional, use SSM otherwise)
        tags: tuple of 2-tuples of tags applied to the instance
    """

    vpc_id: str
    subnet_id: str
    subnet_az: str
    instance_type: str
    role_name: str
    ami_id: str
    security_group_ids: Tuple[str, ...]
    key_name: Optional[str] = None
    tags: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_environ(
        cls,
        environ: Mapping[str, str],
        tag_prefix: str = DEFAULT_TAG_PREFIX,
    ) -> "Ec2InstanceConfig":
        """Read and validate the instance configuration from an environment map."""
        params = {
            "vpc_id": require_value(environ, "VPC_ID"),
            "subnet_id": require_value(environ, "SUBNET_ID"),
            "subnet_az": require_value(environ, "SUBNET_AZ"),
            "instance_type": require_value(environ, "INSTANCE_TYPE"),
            "role_name": require_value(environ, "ROLE_NAME"),
            "ami_id": require_value(environ, "AMI_ID"),
            "security_group_ids": _split_ids(environ, "SECURITY_GROUP_IDS"),
            "key_name": optional_value(environ, "KEY_NAME"),
            "tags": extract_tags(environ, prefix=tag_prefix),
        }

        if not _INSTANCE_TYPE_PATTERN.match(params["instance_type"]):
            raise InvalidConfiguration(
                f"INSTANCE_TYPE '{params['instance_type']}' must look like"
                " '<family>.<size>', e.g. 't3.micro'"
            )

        return cls(**params)


def _split_ids(environ: Mapping[str, str], key: str) -> Tuple[str, ...]:
    # An empty list is rejected by the stack, after the region check.
    raw = environ.get(key)
    if raw is None:
        raise MissingConfiguration(key)
    return tuple(part.strip() for part in raw.split(",") if part.strip())
