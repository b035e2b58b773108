# app/models/invoices.py

from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator

InvoiceStatus = Literal["pending", "paid"]

# Cents must fit a signed 64-bit INTEGER column
MAX_AMOUNT = Decimal("999999999999.99")

# Form keys posted by the invoice create/edit forms
FORM_FIELDS = ("customerId", "amount", "status")

FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

AMOUNT_TOO_LARGE_MESSAGE = "Please enter an amount no greater than $999,999,999,999.99."


def to_cents(amount: Decimal) -> int:
    """Convert a dollar amount to integer minor units, rounding half up."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(Decimal("0.01"))


class InvoiceFields(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_id: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)] = Field(
        alias="customerId"
    )
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT)
    status: InvoiceStatus

    @field_validator("amount", mode="before")
    @classmethod
    def _blank_amount_is_zero(cls, value: Any) -> Any:
        # An empty amount input coerces to 0 and fails the positivity rule
        if value is None:
            return 0
        if isinstance(value, str):
            value = value.strip()
            return value or 0
        return value

    @field_validator("amount")
    @classmethod
    def _at_least_one_cent(cls, value: Decimal) -> Decimal:
        try:
            cents = to_cents(value)
        except InvalidOperation:
            raise ValueError("amount out of range")
        if cents < 1:
            raise ValueError("amount rounds to zero cents")
        return value

    @property
    def amount_in_cents(self) -> int:
        return to_cents(self.amount)


class ValidationResult(BaseModel):
    """Either the parsed invoice fields or field-keyed error messages."""

    data: Optional[InvoiceFields] = None
    errors: Dict[str, List[str]] = Field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.data is not None and not self.errors


class InvoiceFormState(BaseModel):
    """Payload an action hands back to the form instead of redirecting."""

    errors: Dict[str, List[str]] = Field(default_factory=dict)
    message: Optional[str] = None


def validate_invoice_form(form: Mapping[str, Any]) -> ValidationResult:
    """
    Validate raw form fields without raising.

    Every failing field is reported, keyed by its form name (customerId,
    amount, status). Keys other than those are ignored.
    """
    payload = {key: form.get(key) for key in FORM_FIELDS}

    try:
        fields = InvoiceFields.model_validate(payload)
    except ValidationError as exc:
        errors: Dict[str, List[str]] = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "form"
            if field == "amount" and err["type"] == "less_than_equal":
                message = AMOUNT_TOO_LARGE_MESSAGE
            else:
                message = FIELD_MESSAGES.get(field, err["msg"])
            messages = errors.setdefault(field, [])
            if message not in messages:
                messages.append(message)
        return ValidationResult(errors=errors)

    return ValidationResult(data=fields)


class InvoiceListItem(BaseModel):
    id: str
    customer_id: str
    name: str
    email: str
    image_url: Optional[str] = None
    amount: int
    status: InvoiceStatus
    date: date


class InvoiceListResponse(BaseModel):
    items: List[InvoiceListItem]
    total: int
    limit: int
    offset: int


class InvoiceFormOut(BaseModel):
    id: str
    customer_id: str
    amount: Decimal
    status: InvoiceStatus
    date: date

    class Config:
        from_attributes = True
