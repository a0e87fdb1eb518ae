"""Module for defining the EC2 instance infrastructure using AWS CDK.

This module contains the CDK stack that launches a single hardened EC2
instance into an existing VPC, subnet and set of security groups, using
an existing IAM role.

None of the referenced resources are validated here; lookups that fail
surface as CDK or CloudFormation errors at synth or deploy time.
"""

from logging import getLogger
from pathlib import Path

import aws_cdk as cdk
import aws_cdk.aws_ec2 as ec2
import aws_cdk.aws_iam as iam
from constructs import Construct

from ec2provision.errors import EmptyCollection, InvalidConfiguration, RegionMismatch
from ec2provision.machine_image import resolve_machine_image
from ec2provision.schema import Ec2InstanceConfig

logger = getLogger(__name__)

USER_DATA_FILE = Path(__file__).parent / "user-data" / "bootstrap.sh"

ROOT_DEVICE_NAME = "/dev/xvda"
ROOT_VOLUME_SIZE_GIB = 30


class Ec2InstanceStack(cdk.Stack):
    """CDK Stack for a single EC2 instance in existing infrastructure."""

    def __init__(
        self,
        scope: Construct,
        id: str,
        *,
        config: Ec2InstanceConfig,
        **kwargs,
    ) -> None:
        """Initialize the EC2 instance stack.

        Args:
            scope: The parent construct.
            id: The construct ID.
            config: Validated instance configuration.
            **kwargs: Additional keyword arguments passed to the parent Stack.

        Raises:
            InvalidConfiguration: The stack region is not known at synth time,
                or AMI_ID is neither an AMI id nor a known alias.
            RegionMismatch: The subnet AZ is not in the stack region.
            EmptyCollection: No security group IDs were given.
        """
        super().__init__(scope, id, **kwargs)

        self._validate(config)

        user_data = USER_DATA_FILE.read_text(encoding="utf-8")

        # Existing resources
        vpc = ec2.Vpc.from_lookup(self, "SelectedVPC", vpc_id=config.vpc_id)
        subnet = ec2.Subnet.from_subnet_attributes(
            self,
            "SelectedSubnet",
            subnet_id=config.subnet_id,
            availability_zone=config.subnet_az,
        )
        security_groups = [
            ec2.SecurityGroup.from_security_group_id(self, f"SG{idx}", sg_id)
            for idx, sg_id in enumerate(config.security_group_ids)
        ]

        # Must trust ec2.amazonaws.com
        role = iam.Role.from_role_name(self, "InstanceRole", config.role_name)

        key_pair = None
        if config.key_name is not None:
            key_pair = ec2.KeyPair.from_key_pair_name(
                self, "KeyPair", config.key_name
            )

        self.instance = ec2.Instance(
            self,
            "CustomEC2",
            vpc=vpc,
            vpc_subnets=ec2.SubnetSelection(subnets=[subnet]),
            instance_type=ec2.InstanceType(config.instance_type),
            machine_image=resolve_machine_image(self.region, config.ami_id),
            role=role,
            security_group=security_groups[0],
            user_data=ec2.UserData.custom(user_data),
            key_pair=key_pair,
            require_imdsv2=True,
            detailed_monitoring=True,
            block_devices=[
                ec2.BlockDevice(
                    device_name=ROOT_DEVICE_NAME,
                    volume=ec2.BlockDeviceVolume.ebs(
                        ROOT_VOLUME_SIZE_GIB,
                        encrypted=True,
                        volume_type=ec2.EbsDeviceVolumeType.GP3,
                        delete_on_termination=True,
                    ),
                )
            ],
        )

        for security_group in security_groups[1:]:
            self.instance.add_security_group(security_group)

        # Dynamic tags go on the instance only
        for key, value in config.tags:
            cdk.Tags.of(self.instance).add(key, value)
        logger.info(f"Applied {len(config.tags)} tags to the instance")

        cdk.CfnOutput(
            self,
            "InstanceId",
            value=self.instance.instance_id,
            description="ID of the EC2 instance",
        )

        cdk.CfnOutput(
            self,
            "InstancePrivateIp",
            value=self.instance.instance_private_ip,
            description="Private IP address of the EC2 instance",
        )

        cdk.CfnOutput(
            self,
            "InstanceAvailabilityZone",
            value=self.instance.instance_availability_zone,
            description="Availability zone of the EC2 instance",
        )

    def _validate(self, config: Ec2InstanceConfig) -> None:
        if cdk.Token.is_unresolved(self.region):
            raise InvalidConfiguration(
                "The stack region must be known at synth time,"
                " set CDK_DEFAULT_REGION or AWS_REGION"
            )

        if not config.subnet_az.startswith(self.region):
            raise RegionMismatch(config.subnet_az, self.region)

        if not config.security_group_ids:
            raise EmptyCollection(
                "SECURITY_GROUP_IDS",
                "SECURITY_GROUP_IDS must have at least one sg-xxxxxxxx id",
            )
