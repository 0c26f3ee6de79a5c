"""
Data models for the Street View Explorer service.
"""
import math
from typing import Annotated, List, Literal, Optional, Tuple

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator, model_validator

from streetview_explorer.config import (
    DEFAULT_FOV,
    DEFAULT_HEADING,
    DEFAULT_PAGE_TITLE,
    DEFAULT_PITCH,
    DEFAULT_RADIUS,
    DEFAULT_SIZE,
    DEFAULT_SOURCE,
)

LOCATION_FIELDS = ("location", "lat_lng", "pano_id")


class Coordinate(BaseModel):
    """Model for geographic coordinates."""
    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


def parse_lat_lng(value: str) -> Coordinate:
    """Parse a 'lat,lng' string such as '40.714728,-73.998672'."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 2:
        raise ValueError("Invalid lat_lng format. Use format: '40.714728,-73.998672'")
    try:
        lat, lng = float(parts[0]), float(parts[1])
    except ValueError:
        raise ValueError("Invalid lat_lng format. Use format: '40.714728,-73.998672'") from None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise ValueError("Invalid lat_lng format. Use format: '40.714728,-73.998672'")
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        raise ValueError("Coordinates out of range: latitude must be within -90..90 and longitude within -180..180")
    return Coordinate(lat=lat, lng=lng)


def _check_filename(value: str) -> str:
    if "/" in value or "\\" in value or value in (".", ".."):
        raise ValueError("Filename must not contain a directory path")
    if "\x00" in value:
        raise ValueError("Filename must not contain NUL characters")
    return value


Filename = Annotated[str, AfterValidator(_check_filename)]


class LocationQuery(BaseModel):
    """Location selector shared by the image and metadata requests.

    Exactly one of ``location``, ``lat_lng`` or ``pano_id`` must be given.
    ``radius`` only applies to address and coordinate lookups.
    """
    model_config = ConfigDict(extra="ignore")

    location: Optional[str] = Field(
        None, description="The address to get Street View imagery for (e.g., 'Empire State Building, NY')"
    )
    lat_lng: Optional[str] = Field(
        None, description="Comma-separated latitude and longitude (e.g., '40.748817,-73.985428')"
    )
    pano_id: Optional[str] = Field(None, description="Specific panorama ID to fetch")
    radius: int = Field(
        DEFAULT_RADIUS, ge=1, description="Search radius in meters when using location or coordinates"
    )
    source: Literal["default", "outdoor"] = Field(
        DEFAULT_SOURCE, description="Limit Street View searches to selected sources"
    )

    @field_validator("lat_lng")
    @classmethod
    def _valid_lat_lng(cls, value: Optional[str]) -> Optional[str]:
        if value:
            parse_lat_lng(value)
        return value

    @model_validator(mode="after")
    def _exactly_one_location(self):
        selected = [name for name in LOCATION_FIELDS if getattr(self, name)]
        if len(selected) != 1:
            raise ValueError("Exactly one of location, lat_lng, or pano_id must be provided")
        return self

    @property
    def uses_pano_id(self) -> bool:
        return bool(self.pano_id)

    @property
    def location_label(self) -> str:
        """The selector value exactly as the caller gave it."""
        return self.location or self.lat_lng or self.pano_id

    def selector_param(self) -> Tuple[str, str]:
        """Return the upstream (parameter, value) pair for the selector."""
        if self.location:
            return "location", self.location
        if self.lat_lng:
            coord = parse_lat_lng(self.lat_lng)
            return "location", f"{coord.lat},{coord.lng}"
        return "pano", self.pano_id

    def upstream_params(self) -> dict:
        """Query parameters for the metadata endpoint."""
        key, value = self.selector_param()
        params = {key: value, "source": self.source}
        if not self.uses_pano_id:
            params["radius"] = self.radius
        return params

    def query_echo(self) -> dict:
        echo = {"location": self.location_label, "radius": self.radius, "source": self.source}
        if self.uses_pano_id:
            del echo["radius"]
        return echo


class ImageRequest(LocationQuery):
    """Request model for fetching and saving a Street View image."""
    filename: Filename = Field(
        ...,
        min_length=1,
        description="Required filename to save the image (must not already exist in output directory)",
    )
    size: str = Field(
        DEFAULT_SIZE,
        pattern=r"^[1-9]\d*x[1-9]\d*$",
        description="Image dimensions as 'widthxheight' (e.g., '600x400')",
    )
    heading: int = Field(DEFAULT_HEADING, ge=0, le=360, description="Camera heading in degrees (0-360)")
    pitch: int = Field(DEFAULT_PITCH, ge=-90, le=90, description="Camera pitch in degrees (-90 to 90)")
    fov: int = Field(DEFAULT_FOV, ge=10, le=120, description="Field of view in degrees (zoom level, 10-120)")

    def upstream_params(self) -> dict:
        """Query parameters for the image endpoint."""
        params = super().upstream_params()
        params.update(
            size=self.size,
            heading=self.heading,
            pitch=self.pitch,
            fov=self.fov,
            return_error_code="true",
        )
        return params

    def parameters_echo(self) -> dict:
        echo = {
            "location": self.location_label,
            "size": self.size,
            "heading": self.heading,
            "pitch": self.pitch,
            "fov": self.fov,
            "radius": self.radius,
            "source": self.source,
        }
        if self.uses_pano_id:
            del echo["radius"]
        return echo


class MetadataRequest(LocationQuery):
    """Request model for panorama metadata lookups."""


class HtmlPageRequest(BaseModel):
    """Request model for building a virtual tour page."""
    model_config = ConfigDict(extra="ignore")

    filename: Filename = Field(
        ..., min_length=1, description="Name of the HTML file to create (without directory path)"
    )
    title: str = Field(DEFAULT_PAGE_TITLE, description="Title for the HTML page")
    html_elements: List[str] = Field(
        ...,
        min_length=1,
        description=(
            "List of content HTML elements (just the body content, no need for HTML structure). "
            "When including Street View images, use path '../output/filename.jpg'"
        ),
    )


class ListImagesRequest(BaseModel):
    """The image listing takes no arguments."""
    model_config = ConfigDict(extra="ignore")


class ImageInfo(BaseModel):
    """A saved image as seen on disk."""
    filename: str
    size: str
    size_bytes: int
    dimensions: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    created: str
    modified: str

    def to_dict(self) -> dict:
        return self.model_dump(exclude_none=True)
