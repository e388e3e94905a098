import json
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


# ✅ Database
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./employsmart.db")
RUN_MIGRATIONS = _env_flag("RUN_MIGRATIONS")

# ✅ Security
SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))

# ✅ OpenAI
OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")

# ✅ Stripe
STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")

# ✅ Paddle
PADDLE_CLIENT_TOKEN = os.getenv("PADDLE_CLIENT_TOKEN")
PADDLE_ENVIRONMENT = os.getenv("PADDLE_ENVIRONMENT", "sandbox")

# ✅ Google Cloud OCR
GOOGLE_APPLICATION_CREDENTIALS_JSON = os.getenv("GOOGLE_APPLICATION_CREDENTIALS_JSON")
OCR_BUCKET_NAME = os.getenv("OCR_BUCKET_NAME", "orc-employsmart")
OCR_RESULTS_PREFIX = os.getenv("OCR_RESULTS_PREFIX", "ocr_results/")
OCR_DELETE_REMOTE_FILES = _env_flag("OCR_DELETE_REMOTE_FILES")
TMP_DIR = os.getenv("VERCEL_TMP_DIR", "/tmp")

# ✅ Frontend
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:3000")
CHECKOUT_SUCCESS_URL = os.getenv("CHECKOUT_SUCCESS_URL", f"{FRONTEND_URL}/payment-success")
CHECKOUT_CANCEL_URL = os.getenv("CHECKOUT_CANCEL_URL", f"{FRONTEND_URL}/payment-cancelled")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class CredentialsError(Exception):
    """Raised when the Google Cloud service account blob is missing or malformed."""


@dataclass(frozen=True)
class Settings:
    """Immutable snapshot of the runtime configuration handed to components."""
    google_credentials_json: Optional[str] = None
    ocr_bucket_name: str = "orc-employsmart"
    ocr_results_prefix: str = "ocr_results/"
    ocr_delete_remote_files: bool = False
    tmp_dir: str = "/tmp"
    stripe_secret_key: Optional[str] = None
    paddle_client_token: Optional[str] = None
    paddle_environment: str = "sandbox"
    checkout_success_url: str = "http://localhost:3000/payment-success"
    checkout_cancel_url: str = "http://localhost:3000/payment-cancelled"

    @property
    def paddle_ready(self) -> bool:
        return bool(self.paddle_client_token)

    @property
    def stripe_enabled(self) -> bool:
        return bool(self.stripe_secret_key)

    def load_google_credentials(self) -> Dict[str, Any]:
        """
        Parse the service account JSON blob.

        Raises:
            CredentialsError: If the blob is absent or is not a JSON object
        """
        if not self.google_credentials_json:
            raise CredentialsError("Invalid or missing Google Cloud credentials")
        try:
            credentials = json.loads(self.google_credentials_json)
        except ValueError as e:
            raise CredentialsError("Invalid or missing Google Cloud credentials") from e
        if not isinstance(credentials, dict):
            raise CredentialsError("Invalid or missing Google Cloud credentials")
        return credentials


@lru_cache()
def get_settings() -> Settings:
    return Settings(
        google_credentials_json=GOOGLE_APPLICATION_CREDENTIALS_JSON,
        ocr_bucket_name=OCR_BUCKET_NAME,
        ocr_results_prefix=OCR_RESULTS_PREFIX,
        ocr_delete_remote_files=OCR_DELETE_REMOTE_FILES,
        tmp_dir=TMP_DIR,
        stripe_secret_key=STRIPE_SECRET_KEY,
        paddle_client_token=PADDLE_CLIENT_TOKEN,
        paddle_environment=PADDLE_ENVIRONMENT,
        checkout_success_url=CHECKOUT_SUCCESS_URL,
        checkout_cancel_url=CHECKOUT_CANCEL_URL,
    )
