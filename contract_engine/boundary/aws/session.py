"""
Shared boto3 session.

Dependencies: boto3
System role: Single credential/region source for every AWS client
"""

from functools import lru_cache

import boto3


@lru_cache(maxsize=None)
def get_boto3_session(profile: str | None = None, region: str | None = None) -> boto3.Session:
    """
    Get a cached boto3 session.

    Args:
        profile: Named AWS profile (defaults to AWS_PROFILE setting)
        region: AWS region (defaults to AWS_REGION setting)

    Returns:
        boto3.Session: Session for creating clients and resources
    """
    if profile is None and region is None:
        from contract_engine.configs import get_settings

        aws = get_settings().aws
        profile, region = aws.profile, aws.region
    return boto3.Session(profile_name=profile, region_name=region)
