"""
Request and response models for the HTTP layer.

Update models are partial: every field is optional and routers pass
model_dump(exclude_unset=True) to the stores, so fields the client did not send
are left untouched by the merge.
"""

import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict, Any

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _check_email(v):
    if v is not None and not EMAIL_PATTERN.match(v):
        raise ValueError("must be a valid email address")
    return v


class Address(BaseModel):
    model_config = ConfigDict(extra="allow")

    street: str
    city: str
    state: Optional[str] = None
    postalCode: Optional[str] = None
    country: Optional[str] = None

    @field_validator('street', 'city')
    @classmethod
    def must_not_be_blank(cls, v):
        if not v.strip():
            raise ValueError('must not be empty')
        return v


class OrderItem(BaseModel):
    model_config = ConfigDict(extra="allow")

    productId: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)


class OrderCreateRequest(BaseModel):
    userId: str
    items: List[OrderItem]
    shippingAddress: Address
    billingAddress: Optional[Address] = None
    status: Optional[str] = None
    paymentMethod: Optional[str] = None
    notes: Optional[str] = None

    @field_validator('userId')
    @classmethod
    def user_id_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('userId cannot be empty')
        return v

    @field_validator('items')
    @classmethod
    def items_must_not_be_empty(cls, v):
        if not v:
            raise ValueError('order must contain at least one item')
        return v


class OrderUpdateRequest(BaseModel):
    items: Optional[List[OrderItem]] = Field(default=None, min_length=1)
    shippingAddress: Optional[Address] = None
    billingAddress: Optional[Address] = None
    status: Optional[str] = None
    statusNote: Optional[str] = None
    paymentMethod: Optional[str] = None
    paymentStatus: Optional[str] = None
    notes: Optional[str] = None


class OrderStatusUpdateRequest(BaseModel):
    status: str
    note: Optional[str] = None


class OrderItemUpdateRequest(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    quantity: Optional[int] = Field(default=None, ge=1)


class CartItemRequest(BaseModel):
    productId: str
    name: str
    price: float = Field(ge=0)
    quantity: int = Field(ge=1)


class CartItemsRequest(BaseModel):
    items: List[CartItemRequest]


class QuantityUpdateRequest(BaseModel):
    quantity: int


class ProductCreateRequest(BaseModel):
    name: str
    price: float = Field(ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    imageUrl: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)

    @field_validator('name')
    @classmethod
    def name_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('name cannot be empty')
        return v


class ProductUpdateRequest(BaseModel):
    name: Optional[str] = None
    price: Optional[float] = Field(default=None, ge=0)
    description: Optional[str] = None
    category: Optional[str] = None
    imageUrl: Optional[str] = None
    stock: Optional[int] = Field(default=None, ge=0)


class UserCreateRequest(BaseModel):
    username: str = Field(min_length=3, max_length=30)
    email: str
    password: str = Field(min_length=8)
    role: Optional[str] = None

    @field_validator('email')
    @classmethod
    def email_must_be_valid(cls, v):
        return _check_email(v)

    @field_validator('role')
    @classmethod
    def role_must_be_valid(cls, v):
        valid_roles = ['user', 'admin']
        if v is not None and v not in valid_roles:
            raise ValueError(f'role must be one of: {valid_roles}')
        return v


class UserUpdateRequest(BaseModel):
    username: Optional[str] = Field(default=None, min_length=3, max_length=30)
    email: Optional[str] = None

    @field_validator('email')
    @classmethod
    def email_must_be_valid(cls, v):
        return _check_email(v)


class LoginRequest(BaseModel):
    email: str
    password: str


class PasswordResetRequest(BaseModel):
    email: str


class PasswordResetConfirmRequest(BaseModel):
    password: str = Field(min_length=8)


class PaymentCreateRequest(BaseModel):
    userId: str
    orderId: str
    paymentMethod: str
    amount: float = Field(gt=0)
    currency: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class PaymentUpdateRequest(BaseModel):
    paymentMethod: Optional[str] = None
    status: Optional[str] = None
    description: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    status: str
    version: str
    documents: Dict[str, int]


class ErrorResponse(BaseModel):
    error: str
    type: str
    field: Optional[str] = None
