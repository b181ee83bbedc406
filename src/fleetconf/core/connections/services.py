"""Settings for auxiliary services: SMTP delivery and S3 storage."""

from typing import Any

from ..config.coercion import is_present
from ..config.settings import ResolvedSettings

SMTP_FIELDS = {
    "address": "smtp_address",
    "port": "smtp_port",
    "domain": "smtp_domain",
    "user_name": "smtp_user_name",
    "password": "smtp_password",
    "enable_starttls_auto": "smtp_enable_start_tls",
    "open_timeout": "smtp_open_timeout",
    "read_timeout": "smtp_read_timeout",
}


def smtp_settings(settings: ResolvedSettings) -> dict[str, Any] | None:
    """Mail delivery settings, or None when no SMTP server is configured."""
    if not is_present(settings.get("smtp_address")):
        return None

    result: dict[str, Any] = {name: settings.get(key) for name, key in SMTP_FIELDS.items()}

    if is_present(result["password"]) or is_present(result["user_name"]):
        result["authentication"] = settings.get("smtp_authentication")

    verify_mode = settings.get("smtp_openssl_verify_mode")
    if is_present(verify_mode):
        result["openssl_verify_mode"] = verify_mode

    if settings.get("smtp_force_tls"):
        result["tls"] = True

    return {name: value for name, value in result.items() if value is not None}


class S3Settings:
    """S3 availability derived from settings, memoized until reset."""

    def __init__(self, settings: ResolvedSettings):
        self.settings = settings
        self._use_s3: bool | None = None

    def use_s3(self) -> bool:
        if self._use_s3 is None:
            s = self.settings
            credentials = s.is_present("s3_use_iam_profile") or (
                s.is_present("s3_access_key_id") and s.is_present("s3_secret_access_key")
            )
            self._use_s3 = s.is_present("s3_bucket") and s.is_present("s3_region") and credentials
        return self._use_s3

    def bucket_name(self) -> str | None:
        bucket = self.settings.get("s3_bucket")
        if not is_present(bucket):
            return None
        return str(bucket).lower().split("/")[0]

    def reset(self) -> None:
        self._use_s3 = None
