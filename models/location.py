from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field as PydanticField
from pydantic.alias_generators import to_camel
from sqlmodel import Field, SQLModel


# Work site a shift takes place at. Name is the natural key: shifts that
# reference the same name share one record.
class Location(SQLModel, table=True):
    __tablename__ = "locations"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    address: Optional[str] = Field(default=None)
    post_code: Optional[str] = Field(default=None)
    distance: float = Field(default=0.0)
    constituency: Optional[str] = Field(default=None)
    admin_district: Optional[str] = Field(default=None)

    # Coordinates
    longitude: float
    latitude: float
    use_rota_cloud: bool = Field(default=True)

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class CamelModel(BaseModel):
    """Snake-case attributes, camelCase JSON keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class CoordinatesPayload(CamelModel):
    longitude: float = PydanticField(ge=-180, le=180)
    latitude: float = PydanticField(ge=-90, le=90)
    use_rota_cloud: bool = True


# Location block of a create/update/batch payload
class LocationPayload(CamelModel):
    name: str = PydanticField(min_length=1)
    address: str = PydanticField(min_length=1)
    post_code: str = PydanticField(min_length=1)
    # Wire name keeps the historical spelling
    coordinates: CoordinatesPayload = PydanticField(alias="cordinates")
    distance: Optional[float] = None
    constituency: Optional[str] = None
    admin_district: Optional[str] = None


class CoordinatesView(CamelModel):
    longitude: float
    latitude: float
    use_rota_cloud: bool


# Embedded location summary used in shift responses and listings
class LocationSummary(CamelModel):
    id: int
    name: str
    post_code: Optional[str] = None
    distance: Optional[float] = None
    constituency: Optional[str] = None
    admin_district: Optional[str] = None
    coordinates: CoordinatesView
    address: Optional[str] = None

    @classmethod
    def from_location(cls, location: Location) -> "LocationSummary":
        return cls(
            id=location.id,
            name=location.name,
            post_code=location.post_code,
            distance=location.distance,
            constituency=location.constituency,
            admin_district=location.admin_district,
            coordinates=CoordinatesView(
                longitude=location.longitude,
                latitude=location.latitude,
                use_rota_cloud=location.use_rota_cloud,
            ),
            address=location.address,
        )
