"""CDK application entry point for the EC2 instance stack.

This module reads the instance configuration from the environment (and
an optional .env file) and deploys it as a single stack. The stack name
can be chosen with ``cdk deploy -c stackName=...``.
"""
import logging
import os
import sys

import aws_cdk as cdk
from ec2provision._config import load_environ
from ec2provision.errors import ConfigurationError
from ec2provision.schema import Ec2InstanceConfig, StackEnvironmentConfig
from ec2provisioninfra.ec2_instance_stack import Ec2InstanceStack
from rich import print
from rich.console import Console
from rich.logging import RichHandler

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "WARNING").upper(),
    format="%(message)s",
    handlers=[RichHandler(console=Console(stderr=True))],
)

app = cdk.App()

stack_name = app.node.try_get_context("stackName") or "Ec2Stack"

try:
    stack_env = StackEnvironmentConfig.from_settings()
    config = Ec2InstanceConfig.from_environ(load_environ(".env"))
    Ec2InstanceStack(
        app,
        stack_name,
        config=config,
        env=stack_env.to_cdk_environment(),
    )
except ConfigurationError as e:
    print(f"\n[red]{e}[/red]\n", file=sys.stderr)
    sys.exit(1)

app.synth()
