"""Settings for talking to an Argo Server.

Configuration is loaded from:
- environment variables
- and a local `.env` file (if present)

Only the Argo Server (HTTP) connection mode is supported; kubeconfig and
in-cluster Kubernetes API access are not.
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ArgoSettings(BaseSettings):
    """Settings for the Argo Server client and the submit/wait lifecycle.

    Environment variables:
    - ARGO_SERVER_URL                (required)
    - ARGO_TOKEN                     (optional)
    - ARGO_NAMESPACE                 (optional, default "argo")
    - ARGO_INSECURE_SKIP_VERIFY      (optional)
    - ARGO_REQUEST_TIMEOUT_SECONDS   (optional)
    - ARGO_POLL_INTERVAL_SECONDS     (optional)
    - ARGO_WAIT_TIMEOUT_SECONDS      (optional)
    - LOG_LEVEL                      (optional)

    Notes:
        Tests can point at a specific env file with `ArgoSettings(_env_file=path)`.
    """

    server_url: str = Field(
        default="",
        validation_alias="ARGO_SERVER_URL",
        description="Argo Server base URL, e.g. https://argo.example.com:2746",
    )
    # Never serialized or shown in repr.
    token: str = Field(
        default="",
        validation_alias="ARGO_TOKEN",
        exclude=True,
        repr=False,
        description="Bearer token for the Argo Server",
    )
    namespace: str = Field(
        default="argo",
        validation_alias="ARGO_NAMESPACE",
        description="Default namespace for workflow operations",
    )
    insecure_skip_verify: bool = Field(
        default=False,
        validation_alias="ARGO_INSECURE_SKIP_VERIFY",
        description="Skip TLS certificate verification",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias="ARGO_REQUEST_TIMEOUT_SECONDS",
        description="Timeout for a single HTTP request to the Argo Server",
    )
    poll_interval_seconds: float = Field(
        default=5.0,
        gt=0,
        validation_alias="ARGO_POLL_INTERVAL_SECONDS",
        description="Interval between status polls while waiting for a workflow",
    )
    wait_timeout_seconds: float = Field(
        default=600.0,
        gt=0,
        validation_alias="ARGO_WAIT_TIMEOUT_SECONDS",
        description="Overall deadline when waiting for a workflow to finish",
    )

    log_level: str = Field(
        default="INFO",
        validation_alias="LOG_LEVEL",
        description="Root logging level",
    )

    model_config = SettingsConfigDict(
        env_prefix="",
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    @model_validator(mode="after")
    def _require_server_url(self) -> ArgoSettings:
        if not self.server_url.strip():
            raise ValueError("ARGO_SERVER_URL is required")
        return self
