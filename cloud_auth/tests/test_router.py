"""
Test cases for the gateway handlers and the serverless entry point.
"""
import json

import pytest

from cloud_auth import main
from cloud_auth.base_microservice import GatewayRequest
from conftest import START_TIME


def post(path, payload):
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return GatewayRequest(http_method="POST", path=path, body=body)


@pytest.mark.asyncio
async def test_register_then_register_again(api_handler):
    response = await api_handler.handle(post("/register", {"username": "alice", "password": "secret"}))
    assert (response.status_code, response.body) == (200, "Success")

    response = await api_handler.handle(post("/register", {"username": "alice", "password": "secret"}))
    assert (response.status_code, response.body) == (409, "User already exists")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    {"username": "alice", "password": ""},
    {"username": "", "password": "secret"},
    {"username": "alice"},
    "not json",
    "",
    "[1, 2]",
    {"username": 5, "password": "secret"},
])
async def test_register_invalid_request(api_handler, body):
    response = await api_handler.handle(post("/register", body))
    assert (response.status_code, response.body) == (400, "Invalid Request")


@pytest.mark.asyncio
async def test_register_store_fault(api_handler, store):
    store.fail_exists = True
    response = await api_handler.handle(post("/register", {"username": "alice", "password": "secret"}))
    assert (response.status_code, response.body) == (500, "Internal server error")


@pytest.mark.asyncio
async def test_login_flow(api_handler, issuer):
    await api_handler.handle(post("/register", {"username": "alice", "password": "secret"}))

    response = await api_handler.handle(post("/login", {"username": "alice", "password": "wrong"}))
    assert (response.status_code, response.body) == (401, "Invalid login credentials")

    response = await api_handler.handle(post("/login", {"username": "alice", "password": "secret"}))
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/json"
    access_token = json.loads(response.body)["access_token"]
    assert access_token
    assert issuer.validate(access_token).subject == "alice"


@pytest.mark.asyncio
async def test_login_unknown_user(api_handler):
    response = await api_handler.handle(post("/login", {"username": "nobody", "password": "secret"}))
    assert (response.status_code, response.body) == (401, "Invalid login credentials")


@pytest.mark.asyncio
@pytest.mark.parametrize("body", ["{bad json", {"username": "alice"}])
async def test_login_invalid_request(api_handler, body):
    response = await api_handler.handle(post("/login", body))
    assert (response.status_code, response.body) == (400, "invalid request")


@pytest.mark.asyncio
async def test_login_store_fault(api_handler, store):
    store.fail_get = True
    response = await api_handler.handle(post("/login", {"username": "alice", "password": "secret"}))
    assert (response.status_code, response.body) == (500, "Internal server error")


@pytest.mark.asyncio
async def test_protected_route(api_handler, clock):
    await api_handler.handle(post("/register", {"username": "alice", "password": "secret"}))
    login = await api_handler.handle(post("/login", {"username": "alice", "password": "secret"}))
    token = json.loads(login.body)["access_token"]

    response = await api_handler.handle(
        GatewayRequest(http_method="GET", path="/protected", headers={"Authorization": f"Bearer {token}"})
    )
    assert response.status_code == 200

    response = await api_handler.handle(GatewayRequest(http_method="GET", path="/protected"))
    assert (response.status_code, response.body) == (401, "Missing Auth token")

    clock.now = START_TIME + 3601
    response = await api_handler.handle(
        GatewayRequest(http_method="GET", path="/protected", headers={"Authorization": f"Bearer {token}"})
    )
    assert (response.status_code, response.body) == (401, "token expired")


@pytest.mark.asyncio
async def test_unknown_route(api_handler):
    response = await api_handler.handle(GatewayRequest(http_method="DELETE", path="/register"))
    assert response.status_code == 404
    response = await api_handler.handle(GatewayRequest(http_method="GET", path="/nowhere"))
    assert response.status_code == 404


def test_lambda_handler(api_handler, monkeypatch):
    monkeypatch.setattr(main, "get_handler", lambda: api_handler)

    event = {
        "httpMethod": "POST",
        "path": "/register",
        "headers": None,
        "body": json.dumps({"username": "alice", "password": "secret"}),
    }
    assert main.lambda_handler(event, None) == {"statusCode": 200, "body": "Success", "headers": {}}

    event = {"httpMethod": "GET", "path": "/protected", "headers": {}, "body": None}
    assert main.lambda_handler(event, None) == {"statusCode": 401, "body": "Missing Auth token", "headers": {}}


def test_lambda_handler_with_sql_store(tmp_path, monkeypatch):
    monkeypatch.setenv("JWT_SECRET", "lambda-secret-key-that-is-long-enough-for-hs256")
    monkeypatch.setenv("STORE_BACKEND", "sql")
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'users.db'}")
    monkeypatch.setenv("BCRYPT_ROUNDS", "4")
    main.get_handler.cache_clear()

    credentials = json.dumps({"username": "alice", "password": "secret"})
    try:
        register = {"httpMethod": "POST", "path": "/register", "headers": {}, "body": credentials}
        assert main.lambda_handler(register)["statusCode"] == 200
        assert main.lambda_handler(register) == {"statusCode": 409, "body": "User already exists", "headers": {}}

        login = main.lambda_handler({"httpMethod": "POST", "path": "/login", "headers": {}, "body": credentials})
        assert login["statusCode"] == 200
        token = json.loads(login["body"])["access_token"]

        protected = main.lambda_handler({
            "httpMethod": "GET",
            "path": "/protected",
            "headers": {"Authorization": f"Bearer {token}"},
            "body": None,
        })
        assert protected["statusCode"] == 200
    finally:
        store = main.get_handler().auth_service.store
        main.get_event_loop().run_until_complete(store.engine.dispose())
        main.get_handler.cache_clear()
