"""
Configuration settings for the Street View Explorer service.
"""
from pathlib import Path
from typing import Optional

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Street View Static API endpoints
STREETVIEW_IMAGE_URL = "https://maps.googleapis.com/maps/api/streetview"
STREETVIEW_METADATA_URL = "https://maps.googleapis.com/maps/api/streetview/metadata"
REQUEST_TIMEOUT = 30  # seconds for each outbound request

# Output settings
OUTPUT_DIR = "output"  # Directory for storing downloaded images
HTML_DIR = "html"  # Directory for generated tour pages
IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".bmp", ".webp")
JPEG_QUALITY = 95

# Image request defaults
DEFAULT_SIZE = "600x400"
DEFAULT_HEADING = 0
DEFAULT_PITCH = 0
DEFAULT_FOV = 90
DEFAULT_RADIUS = 50  # meters, ignored for panorama ids
DEFAULT_SOURCE = "default"
DEFAULT_PAGE_TITLE = "Street View Tour"

# Server identity
SERVER_NAME = "street-view-explorer"
SERVER_VERSION = "1.0.0"

# Logging settings
LOG_LEVEL = "INFO"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] StreetView-MCP: %(message)s"
LOG_SESSION_FORMAT = "streetview_{timestamp}.txt"  # .txt suffix


class Settings(BaseSettings):
    """Runtime settings, read from the environment and an optional .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="STREETVIEW_",
        case_sensitive=False,
        extra="ignore",
    )

    google_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("google_api_key", "GOOGLE_API_KEY"),
        description="Google Maps API key with the Street View Static API enabled",
    )
    output_dir: Path = Field(default=Path(OUTPUT_DIR), description="Directory for saved images")
    html_dir: Path = Field(default=Path(HTML_DIR), description="Directory for generated HTML pages")
    request_timeout: float = Field(default=REQUEST_TIMEOUT, gt=0)
    log_level: str = Field(default=LOG_LEVEL)
    log_dir: Optional[Path] = Field(default=None, description="Write a session log file here when set")

    @property
    def has_api_key(self) -> bool:
        return bool(self.google_api_key)
