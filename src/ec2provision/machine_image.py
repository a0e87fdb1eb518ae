from logging import getLogger

import aws_cdk.aws_ec2 as ec2

from .errors import InvalidConfiguration

logger = getLogger(__name__)

# see https://docs.aws.amazon.com/linux/al2023/ug/ec2.html
AMI_ALIASES = {
    "al2023-x86_64": "/aws/service/ami-amazon-linux-latest/al2023-ami-kernel-6.1-x86_64",
    "al2023-arm64": "/aws/service/ami-amazon-linux-latest/al2023-ami-kernel-6.1-arm64",
}


def resolve_machine_image(region: str, ami_id_or_alias: str) -> ec2.IMachineImage:
    """Map AMI_ID to a machine image.

    Either a literal ``ami-...`` id in ``region`` or one of the
    :data:`AMI_ALIASES`, which is resolved from SSM Parameter Store at
    deploy time.
    """
    if ami_id_or_alias.startswith("ami-"):
        logger.info(f"Using AMI {ami_id_or_alias} in {region}")
        return ec2.MachineImage.generic_linux({region: ami_id_or_alias})

    parameter_name = AMI_ALIASES.get(ami_id_or_alias)
    if parameter_name is None:
        raise InvalidConfiguration(
            f"AMI_ID must be an 'ami-...' id or one of: {', '.join(AMI_ALIASES)},"
            f" but instead got '{ami_id_or_alias}'"
        )
    logger.info(f"Using AMI from SSM parameter {parameter_name}")
    return ec2.MachineImage.from_ssm_parameter(parameter_name)
