"""
Authentication middleware.

Wraps gateway handlers so they only run for requests carrying a valid,
unexpired bearer token.
"""
from functools import wraps
from http import HTTPStatus
from typing import Awaitable, Callable, Dict, Optional

from cloud_auth.auth.exceptions import ExpiredTokenError, InvalidTokenError
from cloud_auth.auth.jwt import TokenIssuer
from cloud_auth.base_microservice import BaseMicroservice, GatewayRequest, GatewayResponse

Handler = Callable[[GatewayRequest], Awaitable[GatewayResponse]]

MISSING_TOKEN = "Missing Auth token"
UNAUTHORIZED = "User Unauthorized"
TOKEN_EXPIRED = "token expired"


def extract_token_from_headers(headers: Dict[str, str]) -> Optional[str]:
    """
    Return the token of an ``Authorization: Bearer <token>`` header.

    Anything other than exactly one ``Bearer `` separator yields None.
    """
    auth_header = headers.get("Authorization")
    if auth_header is None:
        # Header names arrive lowercased from some proxies
        auth_header = next(
            (v for k, v in headers.items() if k.lower() == "authorization"), None
        )
    if auth_header is None:
        return None

    split_token = auth_header.split("Bearer ")
    if len(split_token) != 2 or not split_token[1]:
        return None
    return split_token[1]


def validate_jwt_middleware(issuer: TokenIssuer, service: Optional[BaseMicroservice] = None):
    """
    Build a decorator requiring a valid bearer token before ``next_handler`` runs.

    Args:
        issuer: Token validator holding the shared secret
        service: Used for logging and response construction

    Returns:
        Decorator for async gateway handlers
    """
    service = service or BaseMicroservice()

    def decorator(next_handler: Handler) -> Handler:
        @wraps(next_handler)
        async def wrapper(request: GatewayRequest) -> GatewayResponse:
            token = extract_token_from_headers(request.headers)
            if token is None:
                return service.gateway_response(HTTPStatus.UNAUTHORIZED, MISSING_TOKEN)

            try:
                claims = issuer.validate(token)
            except ExpiredTokenError:
                return service.gateway_response(HTTPStatus.UNAUTHORIZED, TOKEN_EXPIRED)
            except InvalidTokenError as e:
                service.log_event("token.rejected", {"path": request.path, "reason": str(e)})
                return service.gateway_response(HTTPStatus.UNAUTHORIZED, UNAUTHORIZED)

            service.logger.debug(f"Authorized {claims.subject} for {request.path}")
            return await next_handler(request)

        return wrapper

    return decorator
