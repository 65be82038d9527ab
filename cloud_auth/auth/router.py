"""
Authentication router.

Gateway handlers for the auth endpoints:
- POST /register
- POST /login
- GET /protected (bearer token required)

Every outcome maps to a fixed status code and body; no exception detail
is returned to the client.
"""
from http import HTTPStatus
from typing import Awaitable, Callable, Dict, Tuple

from pydantic import ValidationError as RequestValidationError

from cloud_auth.auth.exceptions import ConflictError, InternalError, UnauthorizedError, ValidationError
from cloud_auth.auth.middleware import validate_jwt_middleware
from cloud_auth.auth.models import LoginRequest, LoginResponse, RegisterUser
from cloud_auth.auth.users import AuthService
from cloud_auth.base_microservice import BaseMicroservice, GatewayRequest, GatewayResponse

JSON_HEADERS = {"Content-Type": "application/json"}


class ApiHandler(BaseMicroservice):
    """
    Translates gateway requests into auth service calls.
    """

    def __init__(self, auth_service: AuthService, **kwargs):
        super().__init__(**kwargs)
        self.auth_service = auth_service
        self.protected = validate_jwt_middleware(auth_service.issuer, self)(self.protected_route)
        self.routes: Dict[Tuple[str, str], Callable[[GatewayRequest], Awaitable[GatewayResponse]]] = {
            ("POST", "/register"): self.register_user,
            ("POST", "/login"): self.login_user,
            ("GET", "/protected"): self.protected,
        }

    async def handle(self, request: GatewayRequest) -> GatewayResponse:
        """Dispatch a request to the handler registered for its method and path."""
        path = "/" + request.path.strip("/")
        handler = self.routes.get((request.http_method.upper(), path))
        if handler is None:
            return self.gateway_response(HTTPStatus.NOT_FOUND, "Not Found")
        return await handler(request)

    async def register_user(self, request: GatewayRequest) -> GatewayResponse:
        try:
            register_request = RegisterUser.model_validate_json(request.body)
        except RequestValidationError:
            return self.gateway_response(HTTPStatus.BAD_REQUEST, "Invalid Request")

        try:
            user = await self.auth_service.register(register_request)
        except ValidationError:
            return self.gateway_response(HTTPStatus.BAD_REQUEST, "Invalid Request")
        except ConflictError:
            return self.gateway_response(HTTPStatus.CONFLICT, "User already exists")
        except InternalError as e:
            self.log_error(e.__cause__ or e, context="User registration")
            return self.gateway_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")

        self.log_event("user.registered", {"username": user.username})
        return self.gateway_response(HTTPStatus.OK, "Success")

    async def login_user(self, request: GatewayRequest) -> GatewayResponse:
        try:
            login_request = LoginRequest.model_validate_json(request.body)
        except RequestValidationError:
            return self.gateway_response(HTTPStatus.BAD_REQUEST, "invalid request")

        try:
            access_token = await self.auth_service.login(login_request)
        except ValidationError:
            return self.gateway_response(HTTPStatus.BAD_REQUEST, "invalid request")
        except UnauthorizedError:
            self.log_event("user.login.failed", {"username": login_request.username})
            return self.gateway_response(HTTPStatus.UNAUTHORIZED, "Invalid login credentials")
        except InternalError as e:
            self.log_error(e.__cause__ or e, context="User login")
            return self.gateway_response(HTTPStatus.INTERNAL_SERVER_ERROR, "Internal server error")

        self.log_event("user.login", {"username": login_request.username})
        return self.gateway_response(
            HTTPStatus.OK,
            LoginResponse(access_token=access_token).model_dump_json(),
            headers=JSON_HEADERS,
        )

    async def protected_route(self, request: GatewayRequest) -> GatewayResponse:
        return self.gateway_response(HTTPStatus.OK, "This is a secret path")
