"""Settings for the snapshot validation webhook.

Every field can be set from the environment with the ``SNAPSHOT_WEBHOOK_``
prefix or from a ``.env`` file; command line flags override both.
"""

import os
from enum import Enum
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

SERVICE_ACCOUNT_TOKEN_PATH = Path("/var/run/secrets/kubernetes.io/serviceaccount/token")


class AuthMode(str, Enum):
    """How the webhook authenticates its reads against the API server."""

    AUTO = "auto"
    KUBECONFIG = "kubeconfig"
    TOKEN = "token"


class LogLevel(str, Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class WebhookConfig(BaseSettings):
    """Configuration for the snapshot validation webhook."""

    model_config = SettingsConfigDict(
        env_prefix="SNAPSHOT_WEBHOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Reading existing classes
    auth_mode: AuthMode = Field(
        default=AuthMode.AUTO,
        description="auto (service account, then kubeconfig), kubeconfig, or token",
    )
    kubeconfig_path: Path | None = Field(
        default=None,
        description="Kubeconfig used outside the cluster",
    )
    kubeconfig_context: str | None = Field(default=None, description="Kubeconfig context")
    api_server: str | None = Field(default=None, description="API server URL for token auth")
    api_token: str | None = Field(default=None, description="Bearer token for token auth")

    # Serving admission reviews
    host: str = Field(default="0.0.0.0", description="Address the webhook listens on")
    port: int = Field(default=443, ge=1, le=65535, description="Secure port of the webhook")
    tls_cert_file: Path | None = Field(
        default=None,
        description="x509 certificate presented to the API server",
    )
    tls_private_key_file: Path | None = Field(
        default=None,
        description="Private key matching tls_cert_file",
    )

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")

    @field_validator("kubeconfig_path", "tls_cert_file", "tls_private_key_file", mode="before")
    @classmethod
    def resolve_path(cls, v: str | Path | None) -> Path | None:
        return None if v is None else Path(v).expanduser().resolve()

    @property
    def effective_kubeconfig_path(self) -> Path:
        """Explicit path, else $KUBECONFIG, else ~/.kube/config."""
        if self.kubeconfig_path:
            return self.kubeconfig_path
        env_path = os.environ.get("KUBECONFIG")
        if env_path:
            return Path(env_path).expanduser().resolve()
        return Path.home() / ".kube" / "config"

    @property
    def tls_enabled(self) -> bool:
        return self.tls_cert_file is not None and self.tls_private_key_file is not None

    def validate_auth_config(self) -> list[str]:
        """Check that the chosen auth mode can work; return warnings.

        Raises:
            ValueError: If the auth mode is missing what it needs.
        """
        if self.auth_mode == AuthMode.TOKEN:
            missing = [name for name in ("api_server", "api_token") if not getattr(self, name)]
            if missing:
                raise ValueError(f"{' and '.join(missing)} required when auth_mode is 'token'")
            return []

        kubeconfig_found = self.effective_kubeconfig_path.exists()
        if self.auth_mode == AuthMode.KUBECONFIG:
            if not kubeconfig_found:
                raise ValueError(f"Kubeconfig file not found: {self.effective_kubeconfig_path}")
            return []

        if SERVICE_ACCOUNT_TOKEN_PATH.exists():
            return ["Running in-cluster, will use service account"]
        if not kubeconfig_found:
            return [
                f"No kubeconfig found at {self.effective_kubeconfig_path}, "
                "will attempt in-cluster auth"
            ]
        return []

    def validate_tls_config(self) -> list[str]:
        """Check the TLS file pair; return warnings.

        The API server only calls webhooks over HTTPS, so plain HTTP is only
        useful behind a terminating proxy and is warned about.

        Raises:
            ValueError: If only one file is set or a file does not exist.
        """
        if (self.tls_cert_file is None) != (self.tls_private_key_file is None):
            raise ValueError("tls_cert_file and tls_private_key_file must be set together")
        if not self.tls_enabled:
            return ["TLS is not configured, serving plain HTTP"]

        for path in (self.tls_cert_file, self.tls_private_key_file):
            if path is not None and not path.exists():
                raise ValueError(f"TLS file not found: {path}")
        return []
