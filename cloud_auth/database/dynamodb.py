"""
DynamoDB user store.

Users live in a single table with ``username`` as the partition key and
the bcrypt hash stored in the ``password`` attribute.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from cloud_auth.auth.exceptions import UserAlreadyExistsError, UserNotFoundError, UserStoreError
from cloud_auth.auth.models import User
from cloud_auth.database.store import UserStore

logger = logging.getLogger("cloud_auth")

# Constants
MAX_RETRIES = 3
CONNECT_TIMEOUT_SECONDS = 3
READ_TIMEOUT_SECONDS = 5


def create_dynamodb_client(region_name: Optional[str] = None, endpoint_url: Optional[str] = None):
    """Build a DynamoDB client with bounded timeouts and retries."""
    return boto3.client(
        "dynamodb",
        region_name=region_name,
        endpoint_url=endpoint_url,
        config=Config(
            connect_timeout=CONNECT_TIMEOUT_SECONDS,
            read_timeout=READ_TIMEOUT_SECONDS,
            retries={
                "max_attempts": MAX_RETRIES,
                "mode": "standard",
            },
        ),
    )


class DynamoDBUserStore(UserStore):
    """UserStore backed by a DynamoDB table."""

    def __init__(self, table_name: str, client=None):
        self.table_name = table_name
        self._client = client or create_dynamodb_client()

    def _key(self, username: str) -> Dict[str, Any]:
        return {"username": {"S": username}}

    def _get_item(self, username: str) -> Optional[Dict[str, Any]]:
        try:
            result = self._client.get_item(
                TableName=self.table_name,
                Key=self._key(username),
                ConsistentRead=True,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"ERROR: DynamoDB get_item failed: {e!r}")
            raise UserStoreError("user lookup failed") from e
        return result.get("Item")

    async def exists(self, username: str) -> bool:
        item = await asyncio.to_thread(self._get_item, username)
        return item is not None

    def _put_item(self, user: User) -> None:
        try:
            self._client.put_item(
                TableName=self.table_name,
                Item={name: {"S": value} for name, value in user.to_item().items()},
                ConditionExpression="attribute_not_exists(#u)",
                ExpressionAttributeNames={"#u": "username"},
            )
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") == "ConditionalCheckFailedException":
                raise UserAlreadyExistsError(user.username) from e
            logger.error(f"ERROR: DynamoDB put_item failed: {e!r}")
            raise UserStoreError("user insert failed") from e
        except BotoCoreError as e:
            logger.error(f"ERROR: DynamoDB put_item failed: {e!r}")
            raise UserStoreError("user insert failed") from e

    async def insert(self, user: User) -> None:
        await asyncio.to_thread(self._put_item, user)

    async def get(self, username: str) -> User:
        item = await asyncio.to_thread(self._get_item, username)
        if item is None:
            raise UserNotFoundError(username)
        try:
            return User(username=item["username"]["S"], password_hash=item["password"]["S"])
        except KeyError as e:
            raise UserStoreError(f"malformed user record: missing {e}") from e
