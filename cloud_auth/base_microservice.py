import os
import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO"),
    format="%(asctime)s %(levelname)s %(message)s",
)
logger = logging.getLogger("cloud_auth")


class GatewayRequest(BaseModel):
    """
    HTTP request record as delivered by the API gateway proxy integration.
    """
    model_config = ConfigDict(populate_by_name=True)

    http_method: str = Field(default="GET", alias="httpMethod")
    path: str = "/"
    headers: Dict[str, str] = Field(default_factory=dict)
    body: str = ""

    @classmethod
    def from_event(cls, event: Dict[str, Any]) -> "GatewayRequest":
        # The gateway sends null for absent headers/body
        return cls(
            http_method=event.get("httpMethod") or "GET",
            path=event.get("path") or event.get("resource") or "/",
            headers=event.get("headers") or {},
            body=event.get("body") or "",
        )


class GatewayResponse(BaseModel):
    """
    HTTP response record returned to the API gateway.
    """
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(alias="statusCode")
    body: str = ""
    headers: Dict[str, str] = Field(default_factory=dict)

    def to_event(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class BaseMicroservice:
    """
    Base class for the gateway-facing handlers. Provides:
    - Error/event logging
    - Gateway response construction
    """
    def __init__(self, log: Optional[logging.Logger] = None):
        self.logger = log or logger

    def gateway_response(self, status_code: int, body: str, headers: Optional[Dict[str, str]] = None) -> GatewayResponse:
        """
        Return a gateway response with a fixed body.
        """
        return GatewayResponse(status_code=int(status_code), body=body, headers=headers or {})

    def log_event(self, event: str, details: Dict[str, Any] = None):
        self.logger.info(f"EVENT: {event} | Details: {details}")

    def log_error(self, error: Exception, context: str = ""):
        self.logger.error(f"ERROR: {error!r} | Context: {context}")
