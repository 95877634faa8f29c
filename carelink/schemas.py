from typing import Literal, Optional

from pydantic import BaseModel, field_validator


class MessageResponse(BaseModel):
    message: str


class GeoPoint(BaseModel):
    """GeoJSON point: coordinates are [longitude, latitude]"""

    type: Literal["Point"] = "Point"
    coordinates: list[float]

    @field_validator("coordinates")
    @classmethod
    def validate_coordinates(cls, v):
        if len(v) != 2:
            raise ValueError("coordinates must be [longitude, latitude]")
        lng, lat = v
        if not -180 <= lng <= 180 or not -90 <= lat <= 90:
            raise ValueError("coordinates out of range")
        return v

    @property
    def longitude(self) -> float:
        return self.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.coordinates[1]

    @classmethod
    def from_columns(cls, longitude: Optional[float], latitude: Optional[float]) -> Optional["GeoPoint"]:
        if longitude is None or latitude is None:
            return None
        return cls(coordinates=[longitude, latitude])
