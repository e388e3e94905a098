"""
Test doubles for the external collaborators: job persistence, Google Cloud
Storage/Vision and the payment gateway.
"""
import json


class RecordingRepository:
    """In-memory persistence collaborator that records every call."""

    def __init__(self, fail_with=None):
        self.calls = []
        self.fail_with = fail_with

    def create_job_post(self, data):
        self.calls.append(("create", None, data))
        if self.fail_with:
            raise self.fail_with
        return {"id": 101, **data}

    def update_job_post(self, job_id, data):
        self.calls.append(("update", job_id, data))
        if self.fail_with:
            raise self.fail_with
        return {"id": job_id, **data}


def vision_shard(text=None):
    """JSON body of one Vision output file; ``text=None`` omits fullTextAnnotation."""
    response = {"context": {"pageNumber": 1}}
    if text is not None:
        response["fullTextAnnotation"] = {"text": text}
    return json.dumps({"inputConfig": {}, "responses": [response]}).encode("utf-8")


class FakeBlob:
    def __init__(self, name, payload=b"", error=None):
        self.name = name
        self.payload = payload
        self.error = error
        self.uploaded_from = None
        self.uploaded_bytes = None
        self.content_type = None
        self.deleted = False

    def upload_from_filename(self, path, content_type=None):
        with open(path, "rb") as f:
            self.uploaded_bytes = f.read()
        self.uploaded_from = path
        self.content_type = content_type

    def download_as_bytes(self):
        if self.error:
            raise self.error
        return self.payload

    def delete(self):
        self.deleted = True


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def blob(self, name):
        blob = FakeBlob(name)
        self.storage.uploads.append(blob)
        return blob


class FakeStorage:
    """
    ``results`` maps shard file names (relative to the job's output prefix)
    to payloads, or to exceptions raised on download. They are listed in
    the given order.
    """

    def __init__(self, results=None, upload_error=None):
        self.results = results or {}
        self.upload_error = upload_error
        self.uploads = []
        self.listed = []
        self.bucket_names = []

    def bucket(self, name):
        self.bucket_names.append(name)
        if self.upload_error:
            raise self.upload_error
        return FakeBucket(self, name)

    def list_blobs(self, bucket_name, prefix=""):
        blobs = []
        for name, payload in self.results.items():
            if isinstance(payload, Exception):
                blobs.append(FakeBlob(prefix + name, error=payload))
            else:
                blobs.append(FakeBlob(prefix + name, payload))
        self.listed.append((bucket_name, prefix, blobs))
        return blobs


class FakeOperation:
    def __init__(self, vision):
        self.vision = vision

    def result(self, timeout=None):
        self.vision.waited = True
        if self.vision.job_error:
            raise self.vision.job_error
        return None


class FakeVision:
    def __init__(self, job_error=None):
        self.job_error = job_error
        self.requests = None
        self.waited = False

    def async_batch_annotate_files(self, requests):
        self.requests = requests
        return FakeOperation(self)


class FakeGateway:
    """PaymentGateway answering from dicts and recording every lookup."""

    def __init__(self, payment_intents=None, sessions=None, subscriptions=None, error=None):
        self.payment_intents = payment_intents or {}
        self.sessions = sessions or {}
        self.subscriptions = subscriptions or {}
        self.error = error
        self.calls = []

    def retrieve_payment_intent(self, client_secret_or_id):
        self.calls.append(("payment_intent", client_secret_or_id))
        if self.error:
            raise self.error
        return self.payment_intents.get(client_secret_or_id)

    def retrieve_checkout_session(self, session_id):
        self.calls.append(("checkout_session", session_id))
        if self.error:
            raise self.error
        return self.sessions.get(session_id)

    def retrieve_subscription(self, subscription_id):
        self.calls.append(("subscription", subscription_id))
        if self.error:
            raise self.error
        return self.subscriptions.get(subscription_id)
