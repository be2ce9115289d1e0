"""Fetch image objects from an S3 bucket."""

from __future__ import annotations

from typing import Optional

import boto3
from botocore.client import BaseClient
from botocore.exceptions import BotoCoreError, ClientError

from ..errors import FetchError, FetchErrorReason
from ..logging import get_logger

logger = get_logger(__name__)

_NOT_FOUND_CODES = {"NoSuchKey", "NoSuchBucket", "NotFound", "404"}
_ACCESS_DENIED_CODES = {"AccessDenied", "AllAccessDisabled", "Forbidden", "403"}


def _classify(exc: ClientError) -> FetchErrorReason:
    code = str(exc.response.get("Error", {}).get("Code", ""))
    if code in _NOT_FOUND_CODES:
        return FetchErrorReason.NOT_FOUND
    if code in _ACCESS_DENIED_CODES:
        return FetchErrorReason.ACCESS_DENIED
    return FetchErrorReason.NETWORK


class S3Fetcher:
    """Reads whole objects from one bucket with a single ``get_object`` call."""

    def __init__(self, bucket_name: str, client: Optional[BaseClient] = None) -> None:
        self.bucket_name = bucket_name
        # Created once and reused across requests; the client is thread-safe.
        self.s3_client = client if client is not None else boto3.client("s3")

    def fetch(self, path: str) -> bytes:
        """
        Download ``path`` from the bucket.

        Raises:
            FetchError: NotFound / AccessDenied from the service error code,
                Network for transport failures and any other service error
        """
        try:
            response = self.s3_client.get_object(Bucket=self.bucket_name, Key=path)
        except ClientError as exc:
            reason = _classify(exc)
            logger.error(f"Failed to retrieve s3://{self.bucket_name}/{path}: {exc}")
            raise FetchError(reason, path, f"Failed to retrieve {path} from S3: {exc}") from exc
        except BotoCoreError as exc:
            logger.error(f"Failed to reach S3 for s3://{self.bucket_name}/{path}: {exc}")
            raise FetchError(FetchErrorReason.NETWORK, path, f"Failed to reach S3: {exc}") from exc

        try:
            data = response["Body"].read()
        except (BotoCoreError, OSError) as exc:
            logger.error(f"Failed to download body of s3://{self.bucket_name}/{path}: {exc}")
            raise FetchError(FetchErrorReason.NETWORK, path, f"Failed to download {path} from S3: {exc}") from exc

        logger.info(f"Retrieved s3://{self.bucket_name}/{path} ({len(data)} bytes)")
        return data
