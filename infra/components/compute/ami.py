"""
AMI resolution for the application instances.

An explicit ami-id wins; otherwise the most recent image matching the
owner and name filter is looked up (the custom image built for the app).
"""

import pulumi
import pulumi_aws as aws


def resolve_ami_id(ami_id: str | None, owner: str, name_filter: str) -> pulumi.Input[str]:
    """
    Resolve the AMI to launch.

    Args:
        ami_id: Explicit AMI id, if configured
        owner: AMI owner for the lookup (account id, 'self' or 'amazon')
        name_filter: Name pattern for the lookup

    Returns:
        AMI id
    """
    if ami_id:
        return ami_id

    ami = aws.ec2.get_ami(
        most_recent=True,
        owners=[owner],
        filters=[
            aws.ec2.GetAmiFilterArgs(
                name="name",
                values=[name_filter],
            ),
            aws.ec2.GetAmiFilterArgs(
                name="virtualization-type",
                values=["hvm"],
            ),
        ],
    )
    pulumi.log.info(f"Using AMI {ami.id} ({ami.name})")
    return ami.id
