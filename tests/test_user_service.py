"""
用户服务测试

覆盖用户创建、凭据校验与角色判断。
"""

import pytest

from anime_server.database.repositories.factory import RepositoryFactory
from anime_server.services.base import AuthenticationError, ValidationError
from anime_server.services.factory import ServiceFactory
from anime_server.services.user import AuthContext, UserService


@pytest.fixture
def user_service(db_session) -> UserService:
    return ServiceFactory(RepositoryFactory(db_session)).user


async def test_create_user_normalizes_roles(user_service):
    result = await user_service.create_user("gustavo", "devdojo", ["admin", "ROLE_USER", "ADMIN"])

    assert result.success
    assert result.data.username == "gustavo"
    assert result.data.authorities == ["ROLE_ADMIN", "ROLE_USER"]


async def test_password_is_stored_hashed(user_service, db_session):
    await user_service.create_user("carlos", "devdojo", ["USER"])

    user = await RepositoryFactory(db_session).user.get_by_username("carlos")

    assert user.hashed_password != "devdojo"
    assert ":" in user.hashed_password


async def test_duplicate_username_is_rejected(user_service):
    await user_service.create_user("carlos", "devdojo", ["USER"])

    result = await user_service.create_user("carlos", "other", ["USER"])

    assert isinstance(result.error, ValidationError)
    assert result.error.field == "username"


@pytest.mark.parametrize("username, password, field", [
    ("", "secret", "username"),
    ("   ", "secret", "username"),
    ("someone", "", "password"),
])
async def test_create_user_requires_credentials(user_service, username, password, field):
    result = await user_service.create_user(username, password, ["USER"])

    assert isinstance(result.error, ValidationError)
    assert result.error.field == field


async def test_authenticate_user(user_service):
    await user_service.create_user("carlos", "devdojo", ["USER"])

    result = await user_service.authenticate_user("carlos", "devdojo")

    assert result.success
    assert result.data.has_role("USER")
    assert not result.data.has_role("ADMIN")


@pytest.mark.parametrize("username, password", [
    ("carlos", "wrong"),
    ("nobody", "devdojo"),
    ("carlos", ""),
])
async def test_authenticate_user_failures(user_service, username, password):
    await user_service.create_user("carlos", "devdojo", ["USER"])

    result = await user_service.authenticate_user(username, password)

    assert isinstance(result.error, AuthenticationError)


async def test_ensure_user_is_idempotent(user_service):
    first = await user_service.ensure_user("gustavo", "devdojo", ["ADMIN", "USER"])
    second = await user_service.ensure_user("gustavo", "changed", ["USER"])

    assert first.data.user_id == second.data.user_id
    assert second.data.has_role("ADMIN")


async def test_ensure_user_skips_when_not_configured(user_service):
    result = await user_service.ensure_user(None, None, ["USER"])

    assert result.success
    assert result.data is None


def test_auth_context_roles_accept_prefix():
    context = AuthContext(user_id=1, username="gustavo", authorities=["ROLE_ADMIN"])

    assert context.has_role("ADMIN")
    assert context.has_role("ROLE_ADMIN")
    assert not context.has_role("USER")


async def test_health_check_counts_users(user_service):
    await user_service.create_user("carlos", "devdojo", ["USER"])

    result = await user_service.health_check()

    assert result.success
    assert result.data["total_users"] == 1
