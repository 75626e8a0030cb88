# products_api/schemas.py

"""
Pydantic schemas for the Products API.
Input schemas coerce a body that already passed the validation gate; the
envelope schemas describe every response shape for the OpenAPI document.
"""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# Schema for creating a new product.
# Used in POST /api/products after the validation gate.
class ProductCreate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str = Field(..., min_length=1, max_length=100, description="Name of the product.")
    price: float = Field(..., gt=0, description="Price of the product. Must be greater than 0.")
    availability: bool = Field(True, description="Whether the product can be sold.")


# Schema for a full update; every editable field is replaced.
# Used in PUT /api/products/{id}.
class ProductUpdate(ProductCreate):
    availability: bool = Field(..., description="Whether the product can be sold.")


class ProductResponse(BaseModel):
    id: int = Field(..., description="The product ID", examples=[1])
    name: str = Field(..., description="The product name", examples=["Monitor curvo 49 pulgadas"])
    price: float = Field(..., description="The product price", examples=[300])
    availability: bool = Field(..., description="The product availability", examples=[True])
    created_at: Optional[datetime] = Field(None, description="Timestamp when the product was created.")
    updated_at: Optional[datetime] = Field(None, description="Timestamp when the product was last updated.")

    model_config = ConfigDict(from_attributes=True)


# --- Response envelopes ---
class ProductEnvelope(BaseModel):
    data: ProductResponse


class ProductListEnvelope(BaseModel):
    data: List[ProductResponse]


class MessageEnvelope(BaseModel):
    data: str = Field(..., examples=["Producto Eliminado"])


class ErrorEnvelope(BaseModel):
    error: str = Field(..., examples=["Producto no encontrado"])


class FieldError(BaseModel):
    type: str = "field"
    value: Optional[Any] = None
    msg: str
    path: str
    location: str


class ValidationErrorEnvelope(BaseModel):
    errors: List[FieldError]
