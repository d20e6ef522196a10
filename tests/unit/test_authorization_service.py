"""AuthorizationService: role precedence, override cache, degrade to viewer."""

from unittest.mock import AsyncMock

import pytest

from fakes import FakeCache, FakePermissionOverrideRepository, FakeUserRoleRepository
from taskboard.application.services.authorization_service import (
    AuthorizationService,
    override_cache_key,
)
from taskboard.domain.enums import RoleName
from taskboard.domain.exceptions import AuthorizationException
from taskboard.domain.value_objects import default_capabilities


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def authorization(store, cache) -> AuthorizationService:
    return AuthorizationService(
        FakeUserRoleRepository(store),
        FakePermissionOverrideRepository(store),
        cache=cache,
        cache_ttl=60,
    )


async def test_highest_role_wins(authorization, store) -> None:
    store.user_roles["u1"] = ["team_member", "manager", "editor"]
    actor = await authorization.build_actor("u1")
    assert actor.role is RoleName.MANAGER
    assert actor.capabilities == default_capabilities(RoleName.MANAGER)


async def test_no_role_or_unknown_role_is_viewer(authorization, store) -> None:
    store.user_roles["u2"] = ["intern"]
    assert (await authorization.build_actor("nobody")).role is RoleName.VIEWER
    assert (await authorization.build_actor("u2")).role is RoleName.VIEWER


async def test_override_is_applied_and_cached(authorization, store, cache) -> None:
    store.user_roles["u1"] = ["editor"]
    overrides = FakePermissionOverrideRepository(store)
    await overrides.upsert("editor", {"can_delete_tasks": True})

    actor = await authorization.build_actor("u1")
    assert actor.capabilities.can_delete_tasks is True
    assert cache.data[override_cache_key(RoleName.EDITOR)]["can_delete_tasks"] is True


async def test_missing_override_is_cached_as_empty(authorization, cache) -> None:
    await authorization.resolve_capabilities(RoleName.MANAGER)
    assert cache.data[override_cache_key(RoleName.MANAGER)] == {}


async def test_invalidate_drops_cached_record(authorization, store, cache) -> None:
    store.user_roles["u1"] = ["editor"]
    await authorization.build_actor("u1")
    overrides = FakePermissionOverrideRepository(store)
    await overrides.upsert("editor", {"can_delete_tasks": True})

    # Still served from cache until invalidated.
    assert (await authorization.build_actor("u1")).capabilities.can_delete_tasks is False
    await authorization.invalidate_role(RoleName.EDITOR)
    assert (await authorization.build_actor("u1")).capabilities.can_delete_tasks is True


async def test_unavailable_cache_is_bypassed(store) -> None:
    cache = FakeCache(available=False)
    authorization = AuthorizationService(
        FakeUserRoleRepository(store), FakePermissionOverrideRepository(store), cache=cache
    )
    await authorization.resolve_capabilities(RoleName.ADMIN)
    assert cache.data == {}


async def test_override_lookup_failure_degrades_to_viewer(store) -> None:
    overrides = AsyncMock()
    overrides.get_by_role.side_effect = RuntimeError("db down")
    store.user_roles["ceo-user"] = ["ceo"]
    authorization = AuthorizationService(FakeUserRoleRepository(store), overrides)

    actor = await authorization.build_actor("ceo-user")
    assert actor.role is RoleName.CEO
    assert actor.capabilities == default_capabilities(RoleName.VIEWER)


async def test_role_lookup_failure_degrades_to_viewer() -> None:
    user_roles = AsyncMock()
    user_roles.get_roles.side_effect = RuntimeError("db down")
    authorization = AuthorizationService(user_roles, AsyncMock())
    actor = await authorization.build_actor("u1")
    assert actor.role is RoleName.VIEWER
    assert actor.capabilities == default_capabilities(RoleName.VIEWER)


def test_require_capability(make_actor) -> None:
    viewer = make_actor(RoleName.VIEWER)
    AuthorizationService.require_capability(viewer, "can_view_tasks")
    with pytest.raises(AuthorizationException) as exc_info:
        AuthorizationService.require_capability(viewer, "can_edit_tasks")
    assert exc_info.value.details["capability"] == "can_edit_tasks"
