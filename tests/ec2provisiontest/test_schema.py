import os
from unittest import mock

import pytest
from pydantic import ValidationError

from ec2provision.errors import InvalidConfiguration, MissingConfiguration
from ec2provision.schema import Ec2InstanceConfig, StackEnvironmentConfig

from .helpers import env_vars_all

REQUIRED_KEYS = [
    "VPC_ID",
    "SUBNET_ID",
    "SUBNET_AZ",
    "INSTANCE_TYPE",
    "ROLE_NAME",
    "AMI_ID",
    "SECURITY_GROUP_IDS",
]


def test_from_environ():
    environ = env_vars_all() | {"TAG_Team": "Infra"}

    config = Ec2InstanceConfig.from_environ(environ)

    assert config.vpc_id == "vpc-123"
    assert config.subnet_id == "subnet-654321"
    assert config.subnet_az == "us-east-1a"
    assert config.instance_type == "t3.micro"
    assert config.role_name == "MyEc2Role"
    assert config.ami_id == "ami-0123456789abcdef0"
    assert config.security_group_ids == ("sg-1", "sg-2")
    assert config.key_name is None
    assert config.tags == (("Team", "Infra"),)


def test_key_name_is_optional():
    config = Ec2InstanceConfig.from_environ(env_vars_all() | {"KEY_NAME": " my-key "})
    assert config.key_name == "my-key"


@pytest.mark.parametrize("key", REQUIRED_KEYS)
def test_missing_required_key(key):
    environ = env_vars_all()
    environ.pop(key)

    with pytest.raises(MissingConfiguration) as exc_info:
        Ec2InstanceConfig.from_environ(environ)
    assert exc_info.value.key == key


@pytest.mark.parametrize("key", [k for k in REQUIRED_KEYS if k != "SECURITY_GROUP_IDS"])
def test_blank_required_key(key):
    environ = env_vars_all() | {key: "  "}

    with pytest.raises(MissingConfiguration) as exc_info:
        Ec2InstanceConfig.from_environ(environ)
    assert exc_info.value.key == key


def test_blank_security_groups_are_left_for_the_stack():
    config = Ec2InstanceConfig.from_environ(env_vars_all() | {"SECURITY_GROUP_IDS": " , "})
    assert config.security_group_ids == ()


@pytest.mark.parametrize("instance_type", ["t3", "t3.", "T3.MICRO", "t3 micro", ".micro"])
def test_malformed_instance_type(instance_type):
    environ = env_vars_all() | {"INSTANCE_TYPE": instance_type}

    with pytest.raises(InvalidConfiguration):
        Ec2InstanceConfig.from_environ(environ)


@pytest.mark.parametrize(
    "instance_type",
    ["t3.micro", "m7g.2xlarge", "u-6tb1.metal", "c7i.metal-24xl", "m7i.metal-48xl", "r7iz.metal-16xl"],
)
def test_valid_instance_type(instance_type):
    config = Ec2InstanceConfig.from_environ(env_vars_all() | {"INSTANCE_TYPE": instance_type})
    assert config.instance_type == instance_type


def test_config_is_frozen():
    config = Ec2InstanceConfig.from_environ(env_vars_all())
    with pytest.raises(ValidationError):
        config.vpc_id = "vpc-other"


@pytest.fixture()
def mock_cdk_env_vars():
    with mock.patch.dict(
        os.environ,
        {"CDK_DEFAULT_ACCOUNT": "123456789012", "CDK_DEFAULT_REGION": "eu-west-2"},
        clear=True,
    ):
        yield 0


@pytest.fixture()
def mock_aws_region_only():
    with mock.patch.dict(os.environ, {"AWS_REGION": "eu-west-1"}, clear=True):
        yield 0


def test_stack_environment_from_settings(mock_cdk_env_vars, tmp_path, monkeypatch):
    assert mock_cdk_env_vars is not None
    monkeypatch.chdir(tmp_path)
    stack_env = StackEnvironmentConfig.from_settings()
    assert stack_env.account == "123456789012"
    assert stack_env.region == "eu-west-2"


def test_stack_environment_region_fallback(mock_aws_region_only, tmp_path, monkeypatch):
    assert mock_aws_region_only is not None
    monkeypatch.chdir(tmp_path)
    stack_env = StackEnvironmentConfig.from_settings()
    assert stack_env.account is None
    assert stack_env.region == "eu-west-1"


def test_stack_environment_overrides(mock_cdk_env_vars, tmp_path, monkeypatch):
    assert mock_cdk_env_vars is not None
    monkeypatch.chdir(tmp_path)
    stack_env = StackEnvironmentConfig.from_settings(region="ap-south-1")
    assert stack_env.region == "ap-south-1"
    assert stack_env.to_cdk_environment().region == "ap-south-1"
