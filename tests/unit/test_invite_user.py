"""InviteUserUseCase over HttpProvisioningClient with a mocked transport."""

import json

import httpx
import pytest

from taskboard.application.use_cases.users import InviteUserUseCase
from taskboard.domain.enums import RoleName
from taskboard.domain.exceptions import (
    AuthorizationException,
    ProvisioningException,
    ValidationException,
)
from taskboard.infrastructure.external.provisioning.http_client import (
    HttpProvisioningClient,
)

URL = "https://identity.example.com/functions/v1/invite-user"


def _use_case(handler) -> InviteUserUseCase:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return InviteUserUseCase(HttpProvisioningClient(URL, http_client=http))


async def test_invite_forwards_bearer_and_normalized_email(admin) -> None:
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "success": True,
                "user": {"id": "u9", "email": "new@example.com", "full_name": "New Person"},
                "message": "Invitation sent",
            },
        )

    result = await _use_case(handler).execute(
        admin,
        email="  New@Example.com ",
        full_name=" New Person ",
        role="editor",
        bearer_token="caller-token",
    )

    assert seen["auth"] == "Bearer caller-token"
    assert seen["body"] == {
        "email": "new@example.com",
        "full_name": "New Person",
        "role": "editor",
    }
    assert result.success is True
    assert result.user.id == "u9"
    assert result.message == "Invitation sent"


async def test_collaborator_error_becomes_provisioning_exception(admin) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "User already exists"})

    with pytest.raises(ProvisioningException) as exc_info:
        await _use_case(handler).execute(
            admin, email="a@b.co", full_name="A", role="viewer", bearer_token="t"
        )
    assert exc_info.value.message == "User already exists"
    assert exc_info.value.details["upstream_status"] == 409


async def test_error_field_on_200_is_still_an_error(admin) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"error": "Only admins can invite"})

    with pytest.raises(ProvisioningException):
        await _use_case(handler).execute(
            admin, email="a@b.co", full_name="A", role="viewer", bearer_token="t"
        )


async def test_unreachable_collaborator(admin) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("refused", request=request)

    with pytest.raises(ProvisioningException) as exc_info:
        await _use_case(handler).execute(
            admin, email="a@b.co", full_name="A", role="viewer", bearer_token="t"
        )
    assert "unreachable" in exc_info.value.message


async def test_unconfigured_provisioning(admin) -> None:
    use_case = InviteUserUseCase(HttpProvisioningClient(None))
    with pytest.raises(ProvisioningException):
        await use_case.execute(
            admin, email="a@b.co", full_name="A", role="viewer", bearer_token="t"
        )


async def test_local_validation_runs_before_forwarding(admin, make_actor) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("must not be called")

    use_case = _use_case(handler)
    with pytest.raises(ValidationException):
        await use_case.execute(
            admin, email="a@b.co", full_name="A", role="intern", bearer_token="t"
        )
    with pytest.raises(ValidationException):
        await use_case.execute(
            admin, email="a@b.co", full_name="  ", role="viewer", bearer_token="t"
        )
    with pytest.raises(AuthorizationException):
        await use_case.execute(
            make_actor(RoleName.MANAGER),
            email="a@b.co",
            full_name="A",
            role="viewer",
            bearer_token="t",
        )


async def test_collaborator_failures_log_under_module_logger(admin, caplog) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(409, json={"error": "User already exists"})

    with caplog.at_level("WARNING"), pytest.raises(ProvisioningException):
        await _use_case(handler).execute(
            admin, email="a@b.co", full_name="A", role="viewer", bearer_token="t"
        )
    assert [r.name for r in caplog.records] == [
        "taskboard.infrastructure.external.provisioning.http_client"
    ]
