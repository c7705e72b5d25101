"""Pydantic schemas for API request/response serialization.

Output models are built by the explicit ``*_out`` functions at the bottom of
this module. None of them declares a password field, so a hash cannot leak
through a response.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import Optional, List, Dict, Any
from datetime import datetime

from saas_backend.core.permissions import Permission, RoleName
from saas_backend.models.person import PersonStatus

# bcrypt only looks at the first 72 bytes and newer releases reject longer input.
MAX_PASSWORD_BYTES = 72


def check_password_bytes(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes long")
    return value


# ---- Auth ----
class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1, max_length=72)

class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)
    given_name: str = Field(..., min_length=1)
    family_name: str = Field(..., min_length=1)
    telephone: Optional[str] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return check_password_bytes(v)


# ---- Role ----
class RoleCreate(BaseModel):
    role_name: RoleName
    permissions: Optional[List[Permission]] = None

class RoleUpdate(BaseModel):
    role_name: Optional[RoleName] = None
    permissions: Optional[List[Permission]] = None

class RoleSummary(BaseModel):
    id: str
    role_name: RoleName
    permissions: List[Permission] = []

class RoleOut(BaseModel):
    id: str
    role_name: RoleName
    permissions: List[Permission]
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---- Person ----
class PersonCreate(BaseModel):
    given_name: str = Field(..., min_length=1)
    family_name: str = Field(..., min_length=1)
    email: EmailStr
    telephone: Optional[str] = None
    password: str = Field(..., min_length=8, max_length=72)
    role_id: str = Field(..., min_length=1)
    status: PersonStatus = PersonStatus.active

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return check_password_bytes(v)

class PersonUpdate(BaseModel):
    given_name: Optional[str] = Field(None, min_length=1)
    family_name: Optional[str] = Field(None, min_length=1)
    email: Optional[EmailStr] = None
    telephone: Optional[str] = None
    password: Optional[str] = Field(None, min_length=8, max_length=72)
    role_id: Optional[str] = None
    status: Optional[PersonStatus] = None

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v):
        return check_password_bytes(v)

class PersonOut(BaseModel):
    id: str
    email: str
    given_name: str
    family_name: str
    telephone: Optional[str] = None
    status: PersonStatus
    role: Optional[RoleSummary] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class PrincipalView(BaseModel):
    """What login and profile return about the authenticated person."""
    id: str
    email: str
    given_name: str
    family_name: str
    role: Optional[RoleSummary] = None


# ---- Tokens ----
class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: PrincipalView

class AccessTokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"


# ---- Business ----
class PostalAddress(BaseModel):
    street_address: Optional[str] = None
    address_locality: Optional[str] = None
    address_region: Optional[str] = None
    postal_code: Optional[str] = None
    address_country: Optional[str] = None

class BusinessCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    address: Optional[PostalAddress] = None
    telephone: Optional[str] = None
    email: Optional[EmailStr] = None
    url: Optional[str] = None
    same_as: Optional[List[str]] = None
    opening_hours: Optional[List[str]] = None
    founder_id: str = Field(..., min_length=1)

class BusinessUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    address: Optional[PostalAddress] = None
    telephone: Optional[str] = None
    email: Optional[EmailStr] = None
    url: Optional[str] = None
    same_as: Optional[List[str]] = None
    opening_hours: Optional[List[str]] = None

class FounderSummary(BaseModel):
    id: str
    given_name: str
    family_name: str
    email: str

class BusinessOut(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    address: Optional[PostalAddress] = None
    telephone: Optional[str] = None
    email: Optional[str] = None
    url: Optional[str] = None
    same_as: List[str] = []
    opening_hours: List[str] = []
    founder: Optional[FounderSummary] = None
    is_deleted: bool = False
    deleted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ---- Generic ----
class MessageResponse(BaseModel):
    message: str
    detail: Optional[Any] = None


# ---- Serializers ----
ADDRESS_FIELDS = (
    "street_address", "address_locality", "address_region",
    "postal_code", "address_country",
)


def role_summary(role) -> Optional[RoleSummary]:
    if role is None:
        return None
    return RoleSummary(id=role.id, role_name=role.role_name, permissions=role.permissions)


def role_out(role) -> RoleOut:
    return RoleOut(
        id=role.id,
        role_name=role.role_name,
        permissions=role.permissions,
        is_deleted=role.is_deleted,
        deleted_at=role.deleted_at,
        created_at=role.created_at,
        updated_at=role.updated_at,
    )


def person_out(person) -> PersonOut:
    return PersonOut(
        id=person.id,
        email=person.email,
        given_name=person.given_name,
        family_name=person.family_name,
        telephone=person.telephone,
        status=person.status,
        role=role_summary(person.role),
        is_deleted=person.is_deleted,
        deleted_at=person.deleted_at,
        created_at=person.created_at,
        updated_at=person.updated_at,
    )


def principal_view(person) -> PrincipalView:
    return PrincipalView(
        id=person.id,
        email=person.email,
        given_name=person.given_name,
        family_name=person.family_name,
        role=role_summary(person.role),
    )


def business_out(business) -> BusinessOut:
    address_values = {f: getattr(business, f) for f in ADDRESS_FIELDS}
    founder = business.founder
    return BusinessOut(
        id=business.id,
        name=business.name,
        description=business.description,
        address=PostalAddress(**address_values) if any(address_values.values()) else None,
        telephone=business.telephone,
        email=business.email,
        url=business.url,
        same_as=business.same_as,
        opening_hours=business.opening_hours,
        founder=FounderSummary(
            id=founder.id,
            given_name=founder.given_name,
            family_name=founder.family_name,
            email=founder.email,
        ) if founder is not None else None,
        is_deleted=business.is_deleted,
        deleted_at=business.deleted_at,
        created_at=business.created_at,
        updated_at=business.updated_at,
    )


def token_claims(person) -> Dict[str, Any]:
    """Claims shared by access and refresh tokens for a person."""
    role = role_summary(person.role)
    return {
        "sub": person.id,
        "email": person.email,
        "role": role.model_dump(mode="json") if role else None,
    }
