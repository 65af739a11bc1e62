from datetime import date
from typing import Dict, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, model_validator

from errors import ValidationError
from hotels import NonBlankStr, validation_error


class OrderRequest(BaseModel):
    """A booking placed against one room type of a hotel"""
    model_config = ConfigDict(allow_inf_nan=False)

    hotel_id: NonBlankStr
    room_type: NonBlankStr
    room_count: int = Field(ge=1)
    check_in_date: date
    check_out_date: date
    user_name: Optional[str] = ""
    phone_number: Optional[str] = ""
    total_price: Optional[float] = Field(None, ge=0)

    @model_validator(mode="after")
    def check_dates(self):
        if self.check_out_date < self.check_in_date:
            raise ValueError("'check_out_date' must not be before 'check_in_date'")
        return self

    @property
    def nights(self) -> int:
        return max((self.check_out_date - self.check_in_date).days, 1)


def parse_order(payload: Dict) -> OrderRequest:
    if not isinstance(payload, dict):
        raise ValidationError("Order payload must be an object")
    try:
        return OrderRequest.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise validation_error(exc) from exc
