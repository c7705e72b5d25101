from datetime import timedelta

import pytest
from sqlalchemy.exc import OperationalError

from saas_backend.core.exceptions import AuthenticationError
from saas_backend.core.permissions import RoleName
from saas_backend.core.security import TokenIssuer, TokenKind, token_issuer
from saas_backend.schemas.schemas import PersonUpdate, PrincipalView
from saas_backend.services.auth_service import AuthService
from saas_backend.services.token_registry import TokenRegistry
from saas_backend.services.user_service import UserService

from conftest import DEFAULT_PASSWORD


@pytest.fixture
def users(db):
    return UserService(db)


@pytest.fixture
def auth(db, users):
    return AuthService(users, registry=TokenRegistry(db))


def test_validate_credentials_success(auth, make_person):
    person = make_person(email="alice@example.com")
    view = auth.validate_credentials("alice@example.com", DEFAULT_PASSWORD)
    assert isinstance(view, PrincipalView)
    assert view.id == person.id
    assert view.role.role_name == RoleName.assistant
    assert "password_hash" not in view.model_dump()


def test_validate_credentials_is_case_insensitive_on_email(auth, make_person):
    make_person(email="alice@example.com")
    assert auth.validate_credentials("Alice@Example.COM", DEFAULT_PASSWORD) is not None


@pytest.mark.parametrize("email,password", [
    ("nobody@example.com", DEFAULT_PASSWORD),
    ("alice@example.com", "wrong-password"),
    ("alice@example.com", ""),
])
def test_validate_credentials_fails_closed(auth, make_person, email, password):
    make_person(email="alice@example.com")
    assert auth.validate_credentials(email, password) is None


def test_validate_credentials_ignores_deleted_person(auth, users, make_person):
    person = make_person(email="alice@example.com")
    users.soft_delete(person.id)
    assert auth.validate_credentials("alice@example.com", DEFAULT_PASSWORD) is None


def test_login_issues_two_distinct_tokens(auth, make_person):
    person = make_person()
    tokens = auth.login(auth.validate_credentials(person.email, DEFAULT_PASSWORD))
    assert tokens.access_token != tokens.refresh_token
    assert tokens.token_type == "bearer"

    access = token_issuer.verify(tokens.access_token, TokenKind.access)
    refresh = token_issuer.verify(tokens.refresh_token, TokenKind.refresh)
    assert access["sub"] == refresh["sub"] == person.id
    assert access["exp"] - access["iat"] < refresh["exp"] - refresh["iat"]
    assert access["exp"] - access["iat"] == 15 * 60
    assert refresh["exp"] - refresh["iat"] == 7 * 24 * 3600
    assert access["email"] == person.email
    assert access["role"]["role_name"] == "Assistant"


def test_login_user_view_has_no_password(auth, make_person):
    person = make_person()
    tokens = auth.login(person)
    dumped = tokens.model_dump()
    assert set(dumped["user"]) == {"id", "email", "given_name", "family_name", "role"}
    assert person.password_hash not in str(dumped)


def test_login_records_refresh_token(auth, db, make_person):
    person = make_person()
    tokens = auth.login(person)
    jti = token_issuer.verify(tokens.refresh_token, TokenKind.refresh)["jti"]
    assert TokenRegistry(db).is_active(jti)


def test_authenticate_raises_generic_error(auth, make_person):
    make_person(email="alice@example.com")
    with pytest.raises(AuthenticationError) as exc:
        auth.authenticate("alice@example.com", "nope-nope")
    assert exc.value.message == "Invalid email or password"
    with pytest.raises(AuthenticationError) as exc:
        auth.authenticate("bob@example.com", "nope-nope")
    assert exc.value.message == "Invalid email or password"


def test_refresh_issues_new_access_token(auth, make_person):
    person = make_person()
    tokens = auth.login(person)
    refreshed = auth.refresh_access_token(tokens.refresh_token)
    payload = token_issuer.verify(refreshed.access_token, TokenKind.access)
    assert payload["sub"] == person.id


def test_refresh_rejects_access_token(auth, make_person):
    tokens = auth.login(make_person())
    with pytest.raises(AuthenticationError) as exc:
        auth.refresh_access_token(tokens.access_token)
    assert exc.value.message == "Invalid refresh token"


def test_refresh_rejects_expired_token(db, users, make_person):
    auth = AuthService(users, refresh_ttl=timedelta(seconds=-5))
    tokens = auth.login(make_person())
    with pytest.raises(AuthenticationError):
        auth.refresh_access_token(tokens.refresh_token)


def test_refresh_rejects_foreign_signature(auth, make_person):
    person = make_person()
    forged = TokenIssuer("someone-else").sign({"sub": person.id}, TokenKind.refresh, timedelta(days=1))
    with pytest.raises(AuthenticationError):
        auth.refresh_access_token(forged)


def test_refresh_fails_once_principal_is_deleted(auth, users, make_person):
    person = make_person()
    tokens = auth.login(person)
    users.soft_delete(person.id)
    with pytest.raises(AuthenticationError) as exc:
        auth.refresh_access_token(tokens.refresh_token)
    assert exc.value.message == "Invalid refresh token"


def test_refresh_reflects_role_change(auth, users, roles, make_person):
    person = make_person(role=RoleName.assistant)
    tokens = auth.login(person)

    users.update(person.id, PersonUpdate(role_id=roles[RoleName.manager].id))
    refreshed = auth.refresh_access_token(tokens.refresh_token)

    old = token_issuer.verify(tokens.access_token, TokenKind.access)
    new = token_issuer.verify(refreshed.access_token, TokenKind.access)
    assert old["role"]["role_name"] == "Assistant"
    assert new["role"]["role_name"] == "Manager"


def test_refresh_without_registry_does_not_check_jti(users, make_person):
    auth = AuthService(users)
    tokens = auth.login(make_person())
    assert auth.refresh_access_token(tokens.refresh_token).access_token


def test_refresh_rejects_unrecorded_token(db, users, make_person):
    person = make_person()
    unrecorded = AuthService(users).login(person)
    auth = AuthService(users, registry=TokenRegistry(db))
    with pytest.raises(AuthenticationError):
        auth.refresh_access_token(unrecorded.refresh_token)


def test_logout_revokes_refresh_tokens(auth, make_person):
    person = make_person()
    first = auth.login(person)
    second = auth.login(person)
    assert auth.logout(person.id) == 2
    for tokens in (first, second):
        with pytest.raises(AuthenticationError):
            auth.refresh_access_token(tokens.refresh_token)
    assert auth.logout(person.id) == 0


def test_logout_without_registry_is_noop(users, make_person):
    assert AuthService(users).logout(make_person().id) == 0


def test_decode_access_token_enforces_kind(auth, make_person):
    tokens = auth.login(make_person())
    assert auth.decode_access_token(tokens.access_token)["type"] == "access"


def test_validate_principal_by_id(auth, users, make_person):
    person = make_person()
    assert auth.validate_principal_by_id(person.id) is person
    assert auth.validate_principal_by_id("missing") is None
    users.soft_delete(person.id)
    assert auth.validate_principal_by_id(person.id) is None


def test_validate_principal_by_id_swallows_storage_errors(auth, users, monkeypatch):
    def boom(*args, **kwargs):
        raise OperationalError("SELECT", {}, Exception("db down"))

    monkeypatch.setattr(users, "find_by_id", boom)
    assert auth.validate_principal_by_id("anyone") is None


def test_soft_delete_then_restore_controls_login(auth, users, make_person):
    person = make_person(email="carol@example.com")
    users.soft_delete(person.id)
    with pytest.raises(AuthenticationError):
        auth.authenticate("carol@example.com", DEFAULT_PASSWORD)
    users.restore(person.id)
    assert auth.authenticate("carol@example.com", DEFAULT_PASSWORD).user.id == person.id
