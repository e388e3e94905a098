"""
PDF text extraction through Google Cloud Storage + Vision.

The uploaded file is written to the OCR bucket, a DOCUMENT_TEXT_DETECTION
batch job is run against it, and the JSON shards Vision writes back to the
bucket are stitched together in page order.
"""
import json
import logging
import os
import re
import shutil
import tempfile
import uuid
from dataclasses import dataclass
from typing import Any, List, Optional

from google.auth.exceptions import GoogleAuthError
from google.cloud import storage, vision
from google.oauth2 import service_account

from app.core.config import CredentialsError, Settings

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"
DEFAULT_FILENAME = "file.pdf"

# Vision names result shards output-<first page>-to-<last page>.json
_SHARD_NAME_RE = re.compile(r"output-(\d+)-to-(\d+)\.json$")


@dataclass
class GCloudClients:
    storage: Any
    vision: Any


def get_gcloud_clients(settings: Settings) -> GCloudClients:
    """
    Build Storage and Vision clients from the service account JSON in settings.

    Raises:
        CredentialsError: If the credentials blob is missing or unusable
    """
    info = settings.load_google_credentials()
    try:
        credentials = service_account.Credentials.from_service_account_info(info)
        storage_client = storage.Client(credentials=credentials, project=info.get("project_id"))
        vision_client = vision.ImageAnnotatorClient(credentials=credentials)
    except (ValueError, KeyError, GoogleAuthError) as e:
        logger.error(f"Failed to load Google Cloud credentials: {e}")
        raise CredentialsError("Invalid or missing Google Cloud credentials") from e

    logger.info("Google Cloud clients initialized")
    return GCloudClients(storage=storage_client, vision=vision_client)


def safe_filename(original_name: Optional[str]) -> str:
    """Basename of the client supplied filename, used as the object name."""
    name = os.path.basename((original_name or "").replace("\\", "/"))
    return name or DEFAULT_FILENAME


def shard_sort_key(name: str):
    """Order result shards by first page; names Vision did not produce go last."""
    match = _SHARD_NAME_RE.search(name)
    if match:
        return (0, int(match.group(1)), name)
    return (1, 0, name)


def extract_shard_text(payload: bytes) -> str:
    """Pull ``responses[0].fullTextAnnotation.text`` out of one result shard, or ''."""
    data = json.loads(payload)
    responses = data.get("responses") or []
    if not responses:
        return ""
    annotation = responses[0].get("fullTextAnnotation") or {}
    return annotation.get("text") or ""


class OCRService:
    """Runs one document through the upload -> annotate -> collect chain."""

    def __init__(
        self,
        clients: GCloudClients,
        bucket_name: str,
        results_prefix: str = "ocr_results/",
        delete_remote_files: bool = False,
    ):
        self.storage = clients.storage
        self.vision = clients.vision
        self.bucket_name = bucket_name
        self.results_prefix = results_prefix
        self.delete_remote_files = delete_remote_files

    @classmethod
    def from_settings(cls, clients: GCloudClients, settings: Settings) -> "OCRService":
        return cls(
            clients,
            bucket_name=settings.ocr_bucket_name,
            results_prefix=settings.ocr_results_prefix,
            delete_remote_files=settings.ocr_delete_remote_files,
        )

    def extract_text(self, local_path: str, filename: str, content_type: Optional[str] = None) -> str:
        """
        Run OCR on a local PDF and return the concatenated text.

        Each shard's text is followed by a newline. Shards that fail to
        download or parse are logged and skipped.
        """
        bucket = self.storage.bucket(self.bucket_name)
        source_blob = self.upload(bucket, local_path, filename, content_type)

        output_prefix = f"{self.results_prefix}{filename}/{uuid.uuid4().hex}/"
        self.annotate(f"gs://{self.bucket_name}/{filename}", f"gs://{self.bucket_name}/{output_prefix}")

        result_blobs = self.list_results(output_prefix)
        text = self.collect_text(result_blobs)
        logger.info(f"OCR text collected: filename={filename}, shards={len(result_blobs)}, chars={len(text)}")

        if self.delete_remote_files:
            self.cleanup(source_blob, result_blobs)

        return text

    def upload(self, bucket, local_path: str, filename: str, content_type: Optional[str] = None):
        logger.info(f"Uploading {filename} to bucket {self.bucket_name}")
        blob = bucket.blob(filename)
        blob.upload_from_filename(local_path, content_type=content_type or PDF_MIME_TYPE)
        return blob

    def annotate(self, source_uri: str, destination_uri: str) -> None:
        """Submit the batch job and block until Vision finishes it."""
        request = vision.AsyncAnnotateFileRequest(
            input_config=vision.InputConfig(
                gcs_source=vision.GcsSource(uri=source_uri),
                mime_type=PDF_MIME_TYPE,
            ),
            features=[vision.Feature(type_=vision.Feature.Type.DOCUMENT_TEXT_DETECTION)],
            output_config=vision.OutputConfig(
                gcs_destination=vision.GcsDestination(uri=destination_uri),
            ),
        )
        operation = self.vision.async_batch_annotate_files(requests=[request])
        logger.info(f"Vision job submitted: source={source_uri}, destination={destination_uri}")

        operation.result(timeout=None)
        logger.info(f"Vision job finished: source={source_uri}")

    def list_results(self, prefix: str) -> List[Any]:
        blobs = [
            blob for blob in self.storage.list_blobs(self.bucket_name, prefix=prefix)
            if blob.name.endswith(".json")
        ]
        return sorted(blobs, key=lambda blob: shard_sort_key(blob.name))

    def collect_text(self, blobs: List[Any]) -> str:
        parts = []
        for blob in blobs:
            try:
                text = extract_shard_text(blob.download_as_bytes())
            except Exception as e:
                logger.error(f"Skipping OCR result {blob.name}: {e}", exc_info=True)
                continue
            if text:
                parts.append(text + "\n")
        return "".join(parts)

    def cleanup(self, source_blob, result_blobs: List[Any]) -> None:
        logger.info(f"Deleting {source_blob.name} and {len(result_blobs)} result shards")
        source_blob.delete()
        for blob in result_blobs:
            blob.delete()


def save_upload_to_temp(fileobj, tmp_dir: str, filename: str) -> str:
    """
    Spool an upload stream into ``tmp_dir`` and return the temporary path.

    Raises:
        OSError: If the temporary file cannot be created or written
    """
    suffix = os.path.splitext(filename)[1]
    fd, path = tempfile.mkstemp(dir=tmp_dir, prefix="ocr-", suffix=suffix)
    try:
        with os.fdopen(fd, "wb") as out:
            shutil.copyfileobj(fileobj, out)
    except OSError:
        remove_temp_file(path)
        raise
    return path


def remove_temp_file(path: Optional[str]) -> None:
    if path and os.path.exists(path):
        os.remove(path)
        logger.debug(f"Removed temporary file {path}")
