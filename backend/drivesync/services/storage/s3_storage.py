"""
AWS S3 storage adapter implementing RemoteStorageInterface.
Stores synchronized files in an S3 bucket, keyed by their drive path.
"""
import asyncio
import mimetypes
from typing import Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from .base import RemoteStorageInterface, renamed_candidates
from ...api.exceptions import RemoteAccessFailed, RemoteDeleteFailed, RemoteUploadFailed
from ...core.logging_config import get_logger
from ...domain import LocationSpec, RemoteId, UploadedFileRecord

logger = get_logger(__name__)

NOT_FOUND_CODES = ("404", "NoSuchKey", "NotFound")


class S3RemoteStorage(RemoteStorageInterface):
    """
    AWS S3 storage adapter.
    The remote identity of a file is its object key.
    """

    def __init__(
        self,
        bucket_name: str,
        aws_access_key_id: Optional[str] = None,
        aws_secret_access_key: Optional[str] = None,
        region_name: str = "us-east-1",
        endpoint_url: Optional[str] = None,  # For S3-compatible services (MinIO, etc.)
        conflict_behavior: str = "rename",
        s3_client=None
    ):
        """
        Initialize S3 storage.

        Args:
            bucket_name: S3 bucket name
            aws_access_key_id: AWS access key (or use IAM role)
            aws_secret_access_key: AWS secret key (or use IAM role)
            region_name: AWS region
            endpoint_url: Optional custom endpoint (for S3-compatible services)
            conflict_behavior: 'rename', 'replace' or 'fail' when the target key exists
            s3_client: Preconfigured boto3 client, mainly for tests
        """
        super().__init__(conflict_behavior)
        self.bucket_name = bucket_name
        self.region_name = region_name

        if s3_client is None:
            config = Config(
                signature_version='s3v4',
                retries={'max_attempts': 3}
            )
            s3_client = boto3.client(
                's3',
                aws_access_key_id=aws_access_key_id,
                aws_secret_access_key=aws_secret_access_key,
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=config
            )
        self.s3_client = s3_client

    async def initialize(self):
        """Initialize storage - verify bucket exists and is accessible."""
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', '')
            if error_code == '404':
                raise ValueError(f"S3 bucket '{self.bucket_name}' does not exist")
            elif error_code == '403':
                raise ValueError(f"Access denied to S3 bucket '{self.bucket_name}'")
            else:
                raise ValueError(f"Error accessing S3 bucket: {e}")

    @staticmethod
    def _key(path: str, name: str) -> str:
        directory = path.strip('/')
        return f"{directory}/{name}" if directory else name

    def _head(self, key: str) -> Optional[dict]:
        try:
            return self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get('Error', {}).get('Code') in NOT_FOUND_CODES:
                return None
            raise

    def _target_key(self, path: str, name: str) -> str:
        if self.conflict_behavior == "replace":
            return self._key(path, name)
        if self.conflict_behavior == "fail":
            key = self._key(path, name)
            if self._head(key) is not None:
                raise RemoteUploadFailed(f"Object already exists in S3: {key}")
            return key
        for candidate in renamed_candidates(name):
            key = self._key(path, candidate)
            if self._head(key) is None:
                return key

    async def upload_file(self, path: str, name: str, content: bytes, size: int) -> UploadedFileRecord:
        """Upload content to S3 under the drive path."""
        content_type = mimetypes.guess_type(name)[0] or 'application/octet-stream'

        def _upload():
            key = self._target_key(path, name)
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentLength=size,
                ContentType=content_type
            )
            head = self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
            return UploadedFileRecord(
                remote_id=RemoteId(key),
                name=key.rsplit('/', 1)[-1],
                url=f"s3://{self.bucket_name}/{key}",
                size=head.get('ContentLength', size),
                mime_type=head.get('ContentType', content_type),
                created_at=head['LastModified'],
                modified_at=head['LastModified']
            )

        logger.info(f"Starting upload file to bucket {self.bucket_name} on path {path}/{name}")
        loop = asyncio.get_running_loop()
        try:
            record = await loop.run_in_executor(None, _upload)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Uploading file to bucket {self.bucket_name} on path {path}/{name} failed: {e}")
            raise RemoteUploadFailed(f"Upload of {path}/{name} failed: {e}") from e
        logger.info(f"Uploading file to bucket {self.bucket_name} succeeded. Item id: {record.remote_id}")
        return record

    async def delete_file(self, remote_id: RemoteId) -> None:
        """Delete an object from S3."""
        def _delete():
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=remote_id)

        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, _delete)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"Failed to delete file with id {remote_id} from bucket {self.bucket_name}")
            raise RemoteDeleteFailed(f"Delete of {remote_id} failed: {e}") from e
        logger.info(f"Deleting file with id {remote_id} from bucket {self.bucket_name} succeeded.")

    async def get_download_url(self, remote_id: RemoteId, expires_in: int = 3600) -> Optional[str]:
        """
        Get a presigned URL to download the object.

        Args:
            remote_id: S3 key of the file
            expires_in: URL expiration time in seconds (default: 1 hour)

        Returns:
            Presigned URL string, or None when the object does not exist
        """
        def _generate_url():
            if self._head(remote_id) is None:
                return None
            return self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket_name, 'Key': remote_id},
                ExpiresIn=expires_in
            )

        loop = asyncio.get_running_loop()
        url = await loop.run_in_executor(None, _generate_url)
        if url is None:
            logger.info(f"File with id {remote_id} not found in bucket {self.bucket_name}. Unable to download.")
        return url

    async def find_file_by_location(self, location: LocationSpec) -> Optional[RemoteId]:
        key = self._key(location.directory_path, location.file_name)
        loop = asyncio.get_running_loop()
        head = await loop.run_in_executor(None, self._head, key)
        if head is None:
            logger.info(f"File at path {location.full_path} not found in bucket {self.bucket_name}.")
            return None
        return RemoteId(key)

    async def me(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, lambda: self.s3_client.head_bucket(Bucket=self.bucket_name))
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Bucket {self.bucket_name} is not accessible: {e}")
            raise RemoteAccessFailed(f"Bucket {self.bucket_name} is not accessible: {e}") from e
        logger.info(f"Bucket {self.bucket_name} is accessible")
