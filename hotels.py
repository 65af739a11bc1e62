from typing import Annotated, Dict, List, Literal

import pydantic
from pydantic import (
    AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints, model_validator,
)

from errors import ValidationError

NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


def validation_error(exc: pydantic.ValidationError) -> ValidationError:
    """Flatten pydantic's error list into a single API error"""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {error['msg']}" if location else error["msg"])
    return ValidationError("; ".join(messages))


class Room(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    room_type: NonBlankStr
    price: float = Field(ge=0)
    available: int = Field(ge=0)


def _clean_sub_images(images):
    if isinstance(images, list):
        return [str(img).strip() for img in images if img and str(img).strip()]
    return images


def _clean_amenities(amenities):
    # the form sends amenities as comma separated text
    if isinstance(amenities, str):
        amenities = amenities.split(",")
    if isinstance(amenities, list):
        return [str(a).strip() for a in amenities if a and str(a).strip()]
    return amenities


def _unique_room_types(rooms: List[Room]) -> List[Room]:
    seen = set()
    for room in rooms:
        if room.room_type in seen:
            raise ValueError(f"Duplicate room type '{room.room_type}'")
        seen.add(room.room_type)
    return rooms


SubImageList = Annotated[List[str], BeforeValidator(_clean_sub_images)]
AmenityList = Annotated[List[str], BeforeValidator(_clean_amenities)]
RoomList = Annotated[List[Room], AfterValidator(_unique_room_types)]


class Hotel(BaseModel):
    """A hotel/homestay document as entered in the add form"""
    model_config = ConfigDict(allow_inf_nan=False)

    hotel_name: NonBlankStr
    address: NonBlankStr
    city: NonBlankStr
    description: NonBlankStr
    main_image: NonBlankStr
    type: Literal["hotel", "homestay"] = "hotel"
    price_per_night: float = Field(0, ge=0)
    rating: float = Field(0, ge=0, le=5)
    sub_images: SubImageList = []
    amenities: AmenityList = []
    rooms: RoomList = []

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data):
        # blank form inputs arrive as null and fall back to the defaults
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class HotelUpdate(BaseModel):
    """Fields the edit form may change; anything else in the payload is ignored"""
    model_config = ConfigDict(allow_inf_nan=False)

    hotel_name: NonBlankStr = None
    address: NonBlankStr = None
    city: NonBlankStr = None
    description: NonBlankStr = None
    main_image: NonBlankStr = None
    type: Literal["hotel", "homestay"] = None
    price_per_night: float = Field(None, ge=0)
    sub_images: SubImageList = None
    amenities: AmenityList = None
    rooms: RoomList = None


def normalize_hotel(payload: Dict) -> Dict:
    """Validate a new hotel/homestay document"""
    if not isinstance(payload, dict):
        raise ValidationError("Hotel payload must be an object")
    try:
        return Hotel.model_validate(payload).model_dump()
    except pydantic.ValidationError as exc:
        raise validation_error(exc) from exc


def normalize_hotel_update(payload: Dict) -> Dict:
    """Validate the editable fields present in an edit request"""
    if not isinstance(payload, dict):
        raise ValidationError("Hotel payload must be an object")
    try:
        return HotelUpdate.model_validate(payload).model_dump(exclude_unset=True)
    except pydantic.ValidationError as exc:
        raise validation_error(exc) from exc
