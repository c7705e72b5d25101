"""Auth API router."""

from fastapi import APIRouter, Depends, status

from saas_backend.api.deps import (
    get_auth_service, get_current_principal, get_role_service, get_user_service,
)
from saas_backend.core.exceptions import ResourceNotFoundError
from saas_backend.core.permissions import RoleName
from saas_backend.models.person import Person
from saas_backend.schemas.schemas import (
    AccessTokenResponse, LoginRequest, MessageResponse, PersonCreate, PersonOut,
    PrincipalView, RefreshRequest, RegisterRequest, TokenResponse, person_out, principal_view,
)
from saas_backend.services.auth_service import AuthService
from saas_backend.services.role_service import RoleService
from saas_backend.services.user_service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, auth: AuthService = Depends(get_auth_service)):
    """Authenticate and return JWT tokens."""
    return auth.authenticate(body.email, body.password)


@router.post("/register", response_model=PersonOut, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    users: UserService = Depends(get_user_service),
    roles: RoleService = Depends(get_role_service),
):
    """Self-registration. New persons get the Assistant role."""
    role = roles.find_by_name(RoleName.assistant)
    if role is None:
        raise ResourceNotFoundError("Default role is not available")
    person = users.create(PersonCreate(
        email=body.email,
        password=body.password,
        given_name=body.given_name,
        family_name=body.family_name,
        telephone=body.telephone,
        role_id=role.id,
    ))
    return person_out(person)


@router.post("/refresh", response_model=AccessTokenResponse)
def refresh(body: RefreshRequest, auth: AuthService = Depends(get_auth_service)):
    """Refresh access token."""
    return auth.refresh_access_token(body.refresh_token)


@router.get("/profile", response_model=PrincipalView)
def profile(principal: Person = Depends(get_current_principal)):
    """Current person, as of this request."""
    return principal_view(principal)


@router.post("/logout", response_model=MessageResponse)
def logout(
    principal: Person = Depends(get_current_principal),
    auth: AuthService = Depends(get_auth_service),
):
    """Revoke all refresh tokens."""
    auth.logout(principal.id)
    return MessageResponse(message="Logged out successfully")
