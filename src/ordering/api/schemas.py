"""Pydantic request schemas for the Ordering API.

These are external contracts (anti-corruption layer), separate from internal
Protean commands. They check shape only; business validation (bilingual text,
quantities, transitions) happens in the domain so there is one source of truth.
Field aliases accept the camelCase names used by existing clients.
"""

from pydantic import BaseModel, ConfigDict, Field


class LocalizedTextSchema(BaseModel):
    en: str | None = None
    ar: str | None = None

    model_config = ConfigDict(extra="forbid")


def text_payload(value: LocalizedTextSchema | None) -> dict | None:
    """Plain ``{en?, ar?}`` dict for a command payload, ``None`` when absent."""
    return value.model_dump(exclude_none=True) if value is not None else None


# ---------------------------------------------------------------------------
# Cart Request Schemas
# ---------------------------------------------------------------------------
class CartItemRequest(BaseModel):
    product_id: str = Field(alias="product")
    quantity: int = Field(ge=1, default=1)
    price: float | None = Field(default=None, allow_inf_nan=False)
    notes: LocalizedTextSchema | None = None

    model_config = ConfigDict(populate_by_name=True)


class AddToCartRequest(BaseModel):
    items: list[CartItemRequest] = Field(min_length=1)
    notes: LocalizedTextSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "items": [
                        {
                            "product": "prod-001",
                            "quantity": 2,
                            "price": 10.0,
                            "notes": {"en": "Gift wrap please", "ar": "يرجى تغليفها كهدية"},
                        }
                    ],
                    "notes": {"en": "Deliver after 5pm"},
                }
            ]
        }
    }


class UpdateCartQuantityRequest(BaseModel):
    quantity: int


class NotesRequest(BaseModel):
    notes: LocalizedTextSchema | None = None


class ApplyDiscountRequest(BaseModel):
    discount: float = Field(allow_inf_nan=False)
    description: LocalizedTextSchema | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [{"discount": 10, "description": {"en": "Eid sale", "ar": "تخفيضات العيد"}}]
        }
    }


class AdminUpdateCartRequest(BaseModel):
    discount: float | None = Field(default=None, allow_inf_nan=False)
    discount_description: LocalizedTextSchema | None = Field(default=None, alias="discountDescription")
    notes: LocalizedTextSchema | None = None
    status: str | None = None

    model_config = ConfigDict(populate_by_name=True)


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class AddressSchema(BaseModel):
    address: LocalizedTextSchema
    city: LocalizedTextSchema
    country: LocalizedTextSchema
    postal_code: str = Field(alias="postalCode")

    model_config = ConfigDict(populate_by_name=True)


class AddressPatchSchema(BaseModel):
    address: LocalizedTextSchema | None = None
    city: LocalizedTextSchema | None = None
    country: LocalizedTextSchema | None = None
    postal_code: str | None = Field(default=None, alias="postalCode")

    model_config = ConfigDict(populate_by_name=True)


class OrderItemSchema(BaseModel):
    product_id: str = Field(alias="product")
    quantity: int
    price: float = Field(allow_inf_nan=False)

    model_config = ConfigDict(populate_by_name=True)


class CreateOrderRequest(BaseModel):
    items: list[OrderItemSchema]
    shipping_address: AddressSchema = Field(alias="shippingAddress")
    payment_method: str = Field(alias="paymentMethod")
    notes: LocalizedTextSchema | None = None
    total_order_price: float | None = Field(default=None, alias="totalOrderPrice", allow_inf_nan=False)

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "examples": [
                {
                    "items": [{"product": "prod-001", "quantity": 2, "price": 10.0}],
                    "shippingAddress": {
                        "address": {"en": "12 King Fahd Road", "ar": "12 طريق الملك فهد"},
                        "city": {"en": "Riyadh", "ar": "الرياض"},
                        "country": {"en": "Saudi Arabia", "ar": "السعودية"},
                        "postalCode": "12211",
                    },
                    "paymentMethod": "cash",
                }
            ]
        },
    )


class CheckoutRequest(BaseModel):
    shipping_address: AddressSchema = Field(alias="shippingAddress")
    payment_method: str = Field(alias="paymentMethod")
    notes: LocalizedTextSchema | None = None

    model_config = ConfigDict(populate_by_name=True)


class UpdateOrderRequest(BaseModel):
    items: list[OrderItemSchema] | None = None
    shipping_address: AddressPatchSchema | None = Field(default=None, alias="shippingAddress")
    payment_method: str | None = Field(default=None, alias="paymentMethod")
    notes: LocalizedTextSchema | None = None
    status: str | None = None
    payment_status: str | None = Field(default=None, alias="paymentStatus")
    is_active: bool | None = Field(default=None, alias="isActive")

    model_config = ConfigDict(populate_by_name=True)

    def changes(self) -> dict:
        """Only the fields the client sent; an explicit ``null`` is kept."""
        patch = self.model_dump(exclude_unset=True)
        if patch.get("notes"):
            patch["notes"] = {k: v for k, v in patch["notes"].items() if v is not None}
        return patch


class OrderStatusRequest(BaseModel):
    status: str


class PaymentStatusRequest(BaseModel):
    payment_status: str = Field(alias="paymentStatus")

    model_config = ConfigDict(populate_by_name=True)
