"""Override management: list, partial upsert, reset."""

import pytest

from fakes import FakeCache, FakePermissionOverrideRepository, FakeUserRoleRepository
from taskboard.application.services.authorization_service import (
    AuthorizationService,
    override_cache_key,
)
from taskboard.application.services.permission_settings_service import (
    PermissionSettingsService,
)
from taskboard.domain.enums import ROLE_PRECEDENCE, RoleName
from taskboard.domain.exceptions import AuthorizationException, ValidationException
from taskboard.domain.value_objects import default_capabilities
from taskboard.infrastructure.persistence.database import AfterCommit


@pytest.fixture
def cache() -> FakeCache:
    return FakeCache()


@pytest.fixture
def settings_service(store, cache) -> PermissionSettingsService:
    overrides = FakePermissionOverrideRepository(store)
    authorization = AuthorizationService(
        FakeUserRoleRepository(store), overrides, cache=cache
    )
    return PermissionSettingsService(overrides, authorization)


async def test_list_covers_every_role_highest_first(settings_service, admin) -> None:
    items = await settings_service.list_overrides(admin)
    assert [i.role for i in items] == [r.value for r in ROLE_PRECEDENCE]
    assert all(i.override is None for i in items)
    assert items[2].effective == default_capabilities(RoleName.MANAGER)


async def test_upsert_is_partial_and_bumps_version(settings_service, admin) -> None:
    first = await settings_service.upsert_override(
        admin, "editor", {"can_delete_tasks": True}
    )
    second = await settings_service.upsert_override(
        admin, "editor", {"can_manage_team": True}
    )
    assert first.override.version == 1
    assert second.override.version == 2
    assert second.effective.can_delete_tasks is True
    assert second.effective.can_manage_team is True


async def test_null_flag_clears_back_to_default(settings_service, admin) -> None:
    await settings_service.upsert_override(admin, "editor", {"can_view_tasks": False})
    cleared = await settings_service.upsert_override(
        admin, "editor", {"can_view_tasks": None}
    )
    assert cleared.effective.can_view_tasks is True


async def test_upsert_invalidates_cached_record(settings_service, admin, cache) -> None:
    key = override_cache_key(RoleName.EDITOR)
    cache.data[key] = {"can_delete_tasks": False}
    await settings_service.upsert_override(admin, "editor", {"can_delete_tasks": True})
    assert key not in cache.data


async def test_cache_dropped_after_commit_not_before(store, cache, admin) -> None:
    overrides = FakePermissionOverrideRepository(store)
    authorization = AuthorizationService(
        FakeUserRoleRepository(store), overrides, cache=cache
    )
    queue = AfterCommit()
    service = PermissionSettingsService(overrides, authorization, after_commit=queue)
    key = override_cache_key(RoleName.VIEWER)

    await service.upsert_override(admin, "viewer", {"can_edit_tasks": True})
    assert queue.pending == 1
    # A reader that still sees the pre-commit row caches it again.
    await cache.set(key, {})
    stale = await authorization.resolve_capabilities(RoleName.VIEWER)
    assert stale.can_edit_tasks is False

    await queue.run()

    assert key not in cache.data
    fresh = await authorization.resolve_capabilities(RoleName.VIEWER)
    assert fresh.can_edit_tasks is True


async def test_rolled_back_write_keeps_cache(store, cache, admin) -> None:
    overrides = FakePermissionOverrideRepository(store)
    authorization = AuthorizationService(
        FakeUserRoleRepository(store), overrides, cache=cache
    )
    queue = AfterCommit()
    service = PermissionSettingsService(overrides, authorization, after_commit=queue)
    key = override_cache_key(RoleName.EDITOR)
    cache.data[key] = {"can_delete_tasks": False}

    await service.reset_override(admin, "editor")

    # Never run: the transaction did not commit.
    assert cache.data[key] == {"can_delete_tasks": False}


async def test_reset_writes_full_default_table(settings_service, admin) -> None:
    await settings_service.upsert_override(admin, "viewer", {"can_manage_users": True})
    reset = await settings_service.reset_override(admin, "viewer")
    assert reset.effective == default_capabilities(RoleName.VIEWER)
    assert reset.override.flags == default_capabilities(RoleName.VIEWER).to_dict()


async def test_unknown_role_or_flag_is_rejected(settings_service, admin) -> None:
    with pytest.raises(ValidationException):
        await settings_service.upsert_override(admin, "intern", {"can_view_tasks": True})
    with pytest.raises(ValidationException):
        await settings_service.upsert_override(admin, "editor", {"can_fly": True})
    with pytest.raises(ValidationException):
        await settings_service.reset_override(admin, "intern")


async def test_manager_cannot_manage_permissions(settings_service, make_actor) -> None:
    manager = make_actor(RoleName.MANAGER)
    with pytest.raises(AuthorizationException):
        await settings_service.list_overrides(manager)
    with pytest.raises(AuthorizationException):
        await settings_service.upsert_override(manager, "viewer", {"can_edit_tasks": True})
