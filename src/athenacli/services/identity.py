"""Caller identity lookup used by result-path templates."""
import logging
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from athenacli.core.exceptions import IdentityError

logger = logging.getLogger(__name__)


class AwsIdentity:
    """Resolves the AWS account ID of the current credentials once."""

    def __init__(self, region: str, client=None):
        self._region = region
        self._client = client
        self._account_id: Optional[str] = None

    def account_id(self) -> str:
        """
        Return the caller's account ID.

        Raises:
            IdentityError: If STS cannot be reached or rejects the credentials
        """
        if self._account_id is None:
            try:
                if self._client is None:
                    self._client = boto3.client("sts", region_name=self._region)
                response = self._client.get_caller_identity()
            except (ClientError, BotoCoreError) as e:
                raise IdentityError(f"could not get caller identity: {e}") from e
            self._account_id = response["Account"]
            logger.debug(f"Resolved account {self._account_id}")
        return self._account_id
