"""Client configuration with environment variable loading.

Pydantic-based configuration for the assistant streaming client.
The bearer token is injected here instead of being looked up at request time.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_ENDPOINT_URL = "https://mi-chatbot-backend-6vjk.onrender.com/assistant/stream"
DEFAULT_ERROR_MESSAGE = "❌ Error al conectar con el backend."


class ClientConfig(BaseModel):
    """Configuration for the assistant streaming client.

    Attributes:
        endpoint_url: URL the multipart command is POSTed to.
        token: Bearer token sent in the Authorization header (may be empty).
        connect_timeout: Seconds allowed to open the connection.
        idle_timeout: Seconds allowed between two body chunks.
        error_message: Text of the entry shown when an exchange fails.
    """

    endpoint_url: str = Field(
        default_factory=lambda: os.getenv("ASSISTANT_URL", DEFAULT_ENDPOINT_URL),
        validate_default=True,
        description="Assistant streaming endpoint",
    )
    token: str = Field(
        default_factory=lambda: os.getenv("ASSISTANT_TOKEN", ""),
        description="Bearer token, sent as-is even when empty",
    )
    connect_timeout: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_CONNECT_TIMEOUT", "10"),
        validate_default=True,
        gt=0.0,
        description="Connection timeout in seconds",
    )
    idle_timeout: float = Field(
        default_factory=lambda: os.getenv("ASSISTANT_IDLE_TIMEOUT", "120"),
        validate_default=True,
        gt=0.0,
        description="Maximum silence between streamed chunks in seconds",
    )
    error_message: str = Field(
        default=DEFAULT_ERROR_MESSAGE,
        min_length=1,
        description="Message shown when an exchange fails",
    )

    @field_validator("endpoint_url")
    @classmethod
    def validate_endpoint_url(cls, v: str) -> str:
        """Require an absolute http(s) URL."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("endpoint_url must be an http:// or https:// URL")
        return v

    @field_validator("token")
    @classmethod
    def strip_token(cls, v: str) -> str:
        return v.strip()

    @property
    def auth_header(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"}


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.

    Raises:
        ValidationError: If an environment value is invalid.
    """
    return ClientConfig()
