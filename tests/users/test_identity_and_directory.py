from __future__ import annotations

import pytest

from src.hris_portal.hris_portal.core.enums import Role
from src.hris_portal.hris_portal.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    NotFoundError,
    ValidationError,
)
from src.hris_portal.hris_portal.users.model import Identity, UserProfile
from src.hris_portal.hris_portal.users.service import SessionResolver


def test_sign_up_notifies_listeners_and_resolver(container):
    seen = []
    actors = []
    container.identity_gateway.on_auth_change(seen.append)
    container.session_resolver.on_actor_change(actors.append)

    identity = container.identity_gateway.sign_up("  New@Example.com ", "secret123", {"name": "New Hire"})

    assert identity.email == "new@example.com"
    assert seen == [identity]
    [actor] = actors
    assert actor.uid == identity.uid
    assert actor.name == "New Hire"
    assert actor.role == Role.EMPLOYEE


def test_sign_in_and_sign_out(container, employee):
    gateway = container.identity_gateway
    actors = []
    container.session_resolver.on_actor_change(actors.append)

    identity, profile = gateway.sign_in("JUAN@example.com", "secret123")
    assert identity.uid == employee.uid
    assert profile.employee_id == "EMP-1"

    gateway.sign_out()
    assert [a.uid if a else None for a in actors] == [employee.uid, None]


def test_resolve_is_per_session_not_last_sign_in(container, admin, employee):
    container.identity_gateway.sign_in("juan@example.com", "secret123")

    assert container.session_resolver.resolve(admin.uid).is_admin
    assert container.session_resolver.resolve(employee.uid).uid == employee.uid


def test_unsubscribed_listener_is_not_called(container, employee):
    seen = []
    unsubscribe = container.identity_gateway.on_auth_change(seen.append)
    unsubscribe()

    container.identity_gateway.sign_out()

    assert seen == []


@pytest.mark.parametrize("email,password", [("juan@example.com", "wrong-pass"), ("nobody@example.com", "secret123")])
def test_bad_credentials(container, employee, email, password):
    with pytest.raises(AuthenticationError):
        container.identity_gateway.sign_in(email, password)


@pytest.mark.parametrize(
    "email,password,profile",
    [
        ("juan@example.com", "secret123", None),
        ("short@example.com", "123", None),
        ("", "secret123", None),
        ("role@example.com", "secret123", {"role": "owner"}),
    ],
)
def test_sign_up_validation(container, employee, email, password, profile):
    with pytest.raises(ValidationError):
        container.identity_gateway.sign_up(email, password, profile)


def test_merge_falls_back_to_identity_without_profile():
    actor = SessionResolver.merge(Identity(uid="u1", email="x@example.com"), None)

    assert actor.name == "x@example.com"
    assert actor.display_employee_id == "N/A"
    assert actor.role == Role.EMPLOYEE


def test_resolve_drops_deleted_profiles(container, admin, employee):
    container.user_service.delete_employee(admin, employee.uid)

    assert container.session_resolver.resolve(employee.uid) is None
    assert container.session_resolver.resolve(None) is None


def test_admin_adds_employee_without_switching_session(container, admin):
    container.identity_gateway.sign_in("admin@example.com", "admin123")
    actors = []
    container.session_resolver.on_actor_change(actors.append)

    profile = container.user_service.add_employee(
        admin, email="mark@example.com", password="secret123", name="Mark", employee_id="EMP-9"
    )

    assert profile.name == "Mark"
    assert actors == []
    identity, _ = container.identity_gateway.sign_in("mark@example.com", "secret123")
    assert identity.uid == profile.uid


def test_add_employee_requires_name_and_admin(container, admin, employee):
    with pytest.raises(ValidationError):
        container.user_service.add_employee(
            admin, email="x@example.com", password="secret123", name=" ", employee_id="E"
        )
    with pytest.raises(AuthorizationError):
        container.user_service.add_employee(
            employee, email="x@example.com", password="secret123", name="X", employee_id="E"
        )


def test_update_employee(container, admin, employee, fixed_now):
    updated = container.user_service.update_employee(admin, employee.uid, {"position": "Lead", "role": "admin"})

    assert isinstance(updated, UserProfile)
    assert updated.position == "Lead"
    assert updated.role == Role.ADMIN
    assert updated.updated_at == fixed_now
    with pytest.raises(ValidationError):
        container.user_service.update_employee(admin, employee.uid, {"email": "other@example.com"})
    with pytest.raises(NotFoundError):
        container.user_service.update_employee(admin, "ghost", {"name": "Ghost"})


def test_admin_cannot_delete_self(container, admin):
    with pytest.raises(ValidationError):
        container.user_service.delete_employee(admin, admin.uid)


def test_search_matches_name_id_and_email(container, admin, employee):
    service = container.user_service

    assert [p.uid for p in service.search_employees("dela")] == [employee.uid]
    assert [p.uid for p in service.search_employees("adm-1")] == [admin.uid]
    assert {p.uid for p in service.search_employees("example.com")} == {admin.uid, employee.uid}
