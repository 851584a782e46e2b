"""AWS session and credential helpers."""

from dataclasses import dataclass

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError

from sfn_retry.utils.exceptions import AuthenticationError

logger = structlog.get_logger()


@dataclass
class CallerIdentity:
    """Identity the resolved credentials belong to."""

    account: str
    arn: str
    user_id: str | None = None


def create_session(profile: str | None = None, region: str | None = None) -> boto3.Session:
    """Create a boto3 session for a named profile.

    Args:
        profile: AWS profile name. None uses the default credential chain
            (environment, instance/Lambda role).
        region: AWS region name.

    Returns:
        boto3 Session.

    Raises:
        AuthenticationError: If the profile does not exist.
    """
    try:
        return boto3.Session(profile_name=profile, region_name=region)
    except BotoCoreError as e:
        logger.error("Failed to create AWS session", profile=profile, error=str(e))
        raise AuthenticationError(f"Could not load AWS profile '{profile}': {e}", profile=profile) from e


def get_caller_identity(session: boto3.Session, profile: str | None = None) -> CallerIdentity:
    """Verify credentials with STS.

    Args:
        session: boto3 session to test.
        profile: Profile name, used for error messages only.

    Returns:
        CallerIdentity of the credentials.

    Raises:
        AuthenticationError: If the credentials are missing or rejected.
    """
    try:
        response = session.client("sts").get_caller_identity()
    except (BotoCoreError, ClientError) as e:
        logger.error("AWS credential check failed", profile=profile, error=str(e))
        raise AuthenticationError(
            f"Failed to authenticate with AWS. Check profile: {profile or 'default'} ({e})",
            profile=profile,
        ) from e

    identity = CallerIdentity(
        account=response.get("Account", ""),
        arn=response.get("Arn", ""),
        user_id=response.get("UserId"),
    )
    logger.debug("AWS credentials validated", account=identity.account, arn=identity.arn)
    return identity
