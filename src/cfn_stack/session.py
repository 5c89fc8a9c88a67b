"""AWS session selection."""

import logging
import os

import aioboto3

logger = logging.getLogger(__name__)

EC2_USER = "ec2-user"


def resolve_profile(profile: str | None) -> str | None:
    """
    Decide which named profile, if any, a session should use.

    Environment credentials win over a profile, and on EC2 instances (running
    as ``ec2-user``) the instance role is used. In both cases the profile is
    dropped so boto's default credential chain applies.
    """
    if os.environ.get("AWS_ACCESS_KEY_ID") and os.environ.get("AWS_SECRET_ACCESS_KEY"):
        if profile:
            logger.debug("Ignoring profile %s: environment credentials are set", profile)
        return None
    if os.environ.get("USER") == EC2_USER:
        if profile:
            logger.debug("Ignoring profile %s: using EC2 instance credentials", profile)
        return None
    return profile


def create_session(profile: str | None = None) -> aioboto3.Session:
    """Create an aioboto3 session with the resolved profile."""
    resolved = resolve_profile(profile)
    if resolved:
        return aioboto3.Session(profile_name=resolved)
    return aioboto3.Session()
