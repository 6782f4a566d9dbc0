"""
API request and response models for ProductDesk REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py and
products/models.py, which own the internal domain representation. Route
handlers map between the two.

Request models only bound sizes and types. Business rules (required fields,
email shape, password strength, positive price) are applied by the services
so they produce the specific messages clients display.

Product fields use camelCase on the wire (imageUrl, createdAt) via the
alias generator; Python code uses snake_case.
"""

from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auth.models import User
from products.models import Product

# ---------------------------------------------------------------------------
# Auth -- request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/auth/signup."""

    name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    email: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=128)


class PasswordCheckRequest(BaseModel):
    password: str = Field(max_length=128)


# ---------------------------------------------------------------------------
# Auth -- response models
# ---------------------------------------------------------------------------


class UserOut(BaseModel):
    """Public view of an identity. Never carries the password hash."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    email: str

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(**user.public_dict())


class AuthResponse(BaseModel):
    """Response body for signup and login."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str
    token: str
    user: UserOut


class MeResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    user: UserOut


class PasswordCheckResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    valid: bool
    checks: dict[str, bool]
    message: Optional[str] = None


# ---------------------------------------------------------------------------
# Products -- request models
# ---------------------------------------------------------------------------


class ProductCreate(BaseModel):
    """Request body for POST /api/products.

    Every field is optional at this layer so a missing field is reported
    by the service as a 400 naming the fields, not a schema error.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: Optional[str] = Field(default=None, max_length=200)
    description: Optional[str] = Field(default=None, max_length=5000)
    price: Optional[Decimal] = None
    category: Optional[str] = Field(default=None, max_length=100)
    image_url: Optional[str] = Field(default=None, max_length=2048)


class ProductUpdate(ProductCreate):
    """Request body for PUT /api/products/{id}. Only the fields sent are applied."""


# ---------------------------------------------------------------------------
# Products -- response models
# ---------------------------------------------------------------------------


class ProductOut(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    description: str
    price: float
    category: str
    image_url: str
    owner: int
    created_at: str
    updated_at: str

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        """Factory Method -- the domain-to-wire mapping lives with the output model."""
        return cls(
            id=product.id,
            name=product.name,
            description=product.description,
            price=float(product.price),
            category=product.category,
            image_url=product.image_url,
            owner=product.owner_id,
            created_at=product.created_at,
            updated_at=product.updated_at,
        )


class ProductResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: Optional[str] = None
    product: ProductOut


class ProductListResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    count: int
    products: list[ProductOut]


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool = True
    message: str


# ---------------------------------------------------------------------------
# Errors and health
# ---------------------------------------------------------------------------


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Envelope returned on every 4xx/5xx response.

    message duplicates error.message at the top level so simple clients can
    show it without digging into the error object.
    """

    model_config = ConfigDict(frozen=True)

    success: bool = False
    message: str
    error: ErrorDetail

    @classmethod
    def build(cls, code: str, message: str, detail: Optional[str] = None) -> "ErrorResponse":
        return cls(message=message, error=ErrorDetail(code=code, message=message, detail=detail))


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    success: bool = True
    status: str = "healthy"
    version: str
    components: dict[str, str]
