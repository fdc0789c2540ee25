"""
Tag helpers for AWS resources.

Every resource carries the project defaults plus Environment and Name.
Autoscaling groups take their tags as key/value/propagate entries instead of
a mapping, so instances they launch inherit them.
"""

import pulumi_aws as aws

from infra.configs.constants import DEFAULT_TAGS


def create_tags(
    environment: str,
    resource_name: str,
    **extra_tags: str,
) -> dict[str, str]:
    """
    Build the standard tag set for one resource.

    Args:
        environment: Deployment environment
        resource_name: Value of the Name tag
        **extra_tags: Additional tags (e.g., Tier="public"); these win over defaults

    Returns:
        Dictionary of tags
    """
    return {
        **DEFAULT_TAGS,
        "Environment": environment,
        "Name": resource_name,
        **extra_tags,
    }


def merge_tags(
    base_tags: dict[str, str],
    *additional_tags: dict[str, str],
) -> dict[str, str]:
    """Merge tag dictionaries left to right; later values win."""
    merged = dict(base_tags)
    for tags in additional_tags:
        merged.update(tags)
    return merged


def propagated_tags(tags: dict[str, str]) -> list[aws.autoscaling.GroupTagArgs]:
    """Convert a tag mapping into autoscaling group tags copied onto launched instances."""
    return [
        aws.autoscaling.GroupTagArgs(key=key, value=value, propagate_at_launch=True)
        for key, value in sorted(tags.items())
    ]
