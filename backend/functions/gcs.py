from typing import Dict, Optional

from google.api_core.exceptions import GoogleAPIError
from google.auth.exceptions import GoogleAuthError
from google.cloud import storage
from loguru import logger

from exceptions import DownloadError, UploadError


class GcsStorage:
    """Cloud Storage reads from any bucket and writes to one output bucket."""

    def __init__(self, output_bucket: str, client: Optional[storage.Client] = None, timeout: float = 60):
        self.output_bucket = output_bucket
        self._client = client
        self.timeout = timeout

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            self._client = storage.Client()
        return self._client

    def download(self, bucket_name: str, object_name: str, destination: str) -> str:
        try:
            blob = self.client.bucket(bucket_name).blob(object_name)
            blob.download_to_filename(destination, timeout=self.timeout)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            raise DownloadError(f"Download of gs://{bucket_name}/{object_name} failed: {e}", step="download") from e

        logger.info(f"Image {object_name} downloaded to {destination}")
        return destination

    def get_metadata(self, bucket_name: str, object_name: str) -> Dict[str, str]:
        try:
            blob = self.client.bucket(bucket_name).get_blob(object_name, timeout=self.timeout)
        except (GoogleAPIError, GoogleAuthError) as e:
            raise DownloadError(f"Metadata lookup for gs://{bucket_name}/{object_name} failed: {e}", step="metadata") from e

        if blob is None:
            raise DownloadError(f"gs://{bucket_name}/{object_name} no longer exists", step="metadata")
        return dict(blob.metadata or {})

    def upload(self, source: str, destination: str, content_type: str, metadata: Dict[str, str]) -> None:
        logger.info(f"Uploading {source} to gs://{self.output_bucket}/{destination}")
        try:
            blob = self.client.bucket(self.output_bucket).blob(destination)
            blob.metadata = metadata
            blob.upload_from_filename(source, content_type=content_type, timeout=self.timeout)
        except (GoogleAPIError, GoogleAuthError, OSError) as e:
            raise UploadError(f"Upload to gs://{self.output_bucket}/{destination} failed: {e}", step="upload") from e
