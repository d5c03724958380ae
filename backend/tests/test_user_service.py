# tests/test_user_service.py - User directory: accounts, lookups, bootstrap
import pytest

from auth import AuthService
from errors import NotFoundError, ValidationError
from models import Role


@pytest.mark.asyncio
async def test_create_user_hashes_password(users):
    created = await users.create("Nina New", "nina@taskdesk.dev", "Secret1234", Role.EMPLOYEE)
    assert created.active is True
    assert created.role == Role.EMPLOYEE
    assert "password_hash" not in created.model_dump()

    stored = await users.get_by_id_or_throw(created.id)
    assert stored.password_hash != "Secret1234"
    assert AuthService.verify_password("Secret1234", stored.password_hash)


@pytest.mark.asyncio
async def test_duplicate_email_rejected(users):
    await users.create("One", "dupe@taskdesk.dev", "Secret1234", Role.EMPLOYEE)
    with pytest.raises(ValidationError, match="Email already exists"):
        await users.create("Two", "dupe@taskdesk.dev", "Secret1234", Role.MANAGER)


@pytest.mark.asyncio
async def test_lookups_raise_not_found(users, employee):
    assert (await users.get_by_email_or_throw("employee@taskdesk.dev")).id == employee.id
    with pytest.raises(NotFoundError):
        await users.get_by_id_or_throw("missing")
    with pytest.raises(NotFoundError):
        await users.get_by_email_or_throw("nobody@taskdesk.dev")


@pytest.mark.asyncio
async def test_employee_pool_includes_team_leads(users, employee, team_lead, manager, admin_user):
    pool = await users.list_employees()
    assert {e.id for e in pool} == {employee.id, team_lead.id}


@pytest.mark.asyncio
async def test_list_all(users, employee, manager):
    everyone = await users.list_all()
    assert {u.email for u in everyone} == {"employee@taskdesk.dev", "manager@taskdesk.dev"}


@pytest.mark.asyncio
async def test_bootstrap_admin_is_idempotent(users):
    await users.ensure_bootstrap_admin("root@taskdesk.dev", "RootPass1234")
    await users.ensure_bootstrap_admin("root@taskdesk.dev", "RootPass1234")
    admins = [u for u in await users.list_all() if u.role == Role.ADMIN]
    assert len(admins) == 1


@pytest.mark.asyncio
async def test_email_domain_is_normalized(users):
    created = await users.create("Mixed Case", "Nina@TaskDesk.DEV", "Secret1234", Role.EMPLOYEE)
    assert created.email == "Nina@taskdesk.dev"

    found = await users.get_by_email_or_throw("Nina@TASKDESK.dev")
    assert found.id == created.id

    with pytest.raises(ValidationError, match="Email already exists"):
        await users.create("Again", "Nina@taskdesk.DEV", "Secret1234", Role.EMPLOYEE)


@pytest.mark.asyncio
async def test_invalid_email_rejected(users):
    with pytest.raises(ValidationError, match="Invalid email"):
        await users.create("Nobody", "not-an-email", "Secret1234", Role.EMPLOYEE)
    with pytest.raises(NotFoundError):
        await users.get_by_email_or_throw("not-an-email")


@pytest.mark.asyncio
async def test_bootstrap_admin_matches_normalized_email(users):
    await users.ensure_bootstrap_admin("Root@TaskDesk.DEV", "RootPass1234")
    await users.ensure_bootstrap_admin("Root@taskdesk.dev", "RootPass1234")
    admins = [u for u in await users.list_all() if u.role == Role.ADMIN]
    assert [a.email for a in admins] == ["Root@taskdesk.dev"]
