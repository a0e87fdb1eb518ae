import aws_cdk as cdk

from ec2provision.schema import Ec2InstanceConfig
from ec2provisioninfra.ec2_instance_stack import Ec2InstanceStack

ACCOUNT = "123456789012"
REGION = "us-east-1"


def env_vars_all() -> dict[str, str]:
    return {
        "VPC_ID": "vpc-123",
        "SUBNET_ID": "subnet-654321",
        "SUBNET_AZ": "us-east-1a",
        "INSTANCE_TYPE": "t3.micro",
        "ROLE_NAME": "MyEc2Role",
        "AMI_ID": "ami-0123456789abcdef0",
        "SECURITY_GROUP_IDS": "sg-1, sg-2",
    }


def make_stack(
    config: Ec2InstanceConfig,
    region: str | None = REGION,
) -> Ec2InstanceStack:
    app = cdk.App()
    env = cdk.Environment(account=ACCOUNT, region=region) if region else None
    return Ec2InstanceStack(app, "Ec2Stack", config=config, env=env)
