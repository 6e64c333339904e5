"""Earthquake and location models in the USGS GeoJSON feature shape."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, model_serializer

HIGH_MAGNITUDE = 5.0
MODERATE_MAGNITUDE = 3.0


class Address(BaseModel):
    """Structured address from the reverse geocoder.

    Nominatim returns a varying set of keys, so unknown ones are kept.
    """

    model_config = ConfigDict(extra="allow")

    road: Optional[str] = None
    city: Optional[str] = None
    county: Optional[str] = None
    state: Optional[str] = None
    country: Optional[str] = None
    postcode: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_absent(self, handler):
        return {key: value for key, value in handler(self).items() if value is not None}

    def filled(self) -> dict:
        """Return only the address fields that carry a value."""
        return {key: value for key, value in self.model_dump().items() if value}


class LocationDetails(BaseModel):
    """Reverse-geocoded location attached to an earthquake."""

    display_name: Optional[str] = None
    address: Optional[Address] = None
    lat: Optional[str] = None
    lon: Optional[str] = None

    @model_serializer(mode="wrap")
    def _drop_absent(self, handler):
        return {key: value for key, value in handler(self).items() if value is not None}

    @computed_field
    @property
    def has_content(self) -> bool:
        return bool(self.display_name) or bool(
            self.address is not None and self.address.filled()
        )


class EarthquakeProperties(BaseModel):
    """Properties of a USGS event feature."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    mag: Optional[float] = None
    place: Optional[str] = None
    time: Optional[int] = None  # epoch milliseconds
    url: Optional[str] = None
    title: Optional[str] = None
    tsunami: int = 0
    type: Optional[str] = None
    location_details: Optional[LocationDetails] = Field(
        default=None, alias="locationDetails"
    )

    @computed_field
    @property
    def severity(self) -> str:
        if self.mag is None:
            return "low"
        if self.mag >= HIGH_MAGNITUDE:
            return "high"
        if self.mag >= MODERATE_MAGNITUDE:
            return "moderate"
        return "low"

    @computed_field
    @property
    def tsunami_alert(self) -> bool:
        return self.tsunami == 1


class Geometry(BaseModel):
    """GeoJSON point geometry: [longitude, latitude, depth_km]."""

    model_config = ConfigDict(extra="allow")

    coordinates: list[float] = Field(min_length=2)


class Earthquake(BaseModel):
    """A single seismic event record."""

    model_config = ConfigDict(extra="allow")

    id: str
    properties: EarthquakeProperties
    geometry: Geometry

    @property
    def longitude(self) -> float:
        return self.geometry.coordinates[0]

    @property
    def latitude(self) -> float:
        return self.geometry.coordinates[1]

    @computed_field
    @property
    def depth_km(self) -> Optional[float]:
        coordinates = self.geometry.coordinates
        return coordinates[2] if len(coordinates) > 2 else None

    def with_location_details(self, details: LocationDetails) -> "Earthquake":
        """Return a copy of the event carrying reverse-geocoded details.

        Args:
            details: Location details to attach.

        Returns:
            A new Earthquake; the original is left untouched.
        """
        properties = self.properties.model_copy(
            update={"location_details": details}
        )
        return self.model_copy(update={"properties": properties})
