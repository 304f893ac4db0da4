# app_checkout/sql/schemas.py
from decimal import Decimal
from pydantic import BaseModel, Field, ConfigDict
from typing import Optional, Literal

class Message(BaseModel):
    detail: Optional[str] = Field(examples=["error or success message"])

OrderStatus = Literal["Pending", "Paid", "Rejected", "Error"]

# approved / declined come from the gateway; the others are decided locally
ConfirmOutcome = Literal["approved", "declined", "session_missing", "missing_input"]

class Product(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str = Field(description="Identificador del producto")
    name: str = Field(examples=["Mouse"])
    price: Decimal = Field(description="Precio con 2 decimales", examples=["79.90"])

class Order(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    purchase_number: str = Field(pattern=r"^\d{12}$", examples=["251019143005"])
    amount: Decimal
    currency: str = Field(min_length=3, max_length=3, examples=["PEN"])
    status: OrderStatus = Field(default="Pending")
    customer_email: Optional[str] = None

class CheckoutInitResult(BaseModel):
    """Everything the browser needs to open the Niubiz payment form."""
    merchant_id: str
    session_key: str
    purchase_number: str
    amount: Decimal
    currency: str
    static_js_url: str

class AuthorizationResult(BaseModel):
    """Outcome of the authorization call. raw_json is always the untouched body."""
    approved: bool = False
    authorization_code: Optional[str] = None
    masked_card: Optional[str] = None
    raw_json: str

class ConfirmResult(BaseModel):
    success: bool
    outcome: ConfirmOutcome
    purchase_number: str
    authorization_code: Optional[str] = None
    message: str = Field(examples=["Pago aprobado"])
    masked_card: Optional[str] = None
    raw_json: str = Field(default="{}")
