# app/models/customers.py

from typing import Annotated, Any, Dict, List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, Field


def _check_email(value: str) -> str:
    # validated only; stored exactly as sent
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError as e:
        raise ValueError(f"value is not a valid email address: {e}")
    return value


Email = Annotated[str, AfterValidator(_check_email)]


class CustomerOut(BaseModel):
    customer_id: int
    name: str
    identification_number: str
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None


class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    identification_number: str = Field(min_length=1)
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[Email] = None


class CustomerUpdate(BaseModel):
    """
    Partial update. Every field is optional.

    model_fields_set tells apart a field the caller left out from one sent as
    null; changes() currently treats both as "keep the stored value".
    """

    name: Optional[str] = None
    identification_number: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[Email] = None

    def changes(self) -> Dict[str, Any]:
        return {
            field: value
            for field, value in self.model_dump(include=self.model_fields_set).items()
            if value is not None
        }


class CustomerPage(BaseModel):
    data: List[CustomerOut]
    page: int
    limit: int
    # rows in this page
    total: int
    # rows in the whole table
    total_count: int


class DeleteResponse(BaseModel):
    success: bool
    message: str
