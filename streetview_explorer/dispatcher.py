"""
Tool dispatch - validates a tool's arguments, runs its handler and wraps the
outcome in the response envelope.

Success: {"ok": true, "result": {...}}
Failure: {"ok": false, "error": {"type": ..., "message": ...}}

Only StreetViewError subclasses become error envelopes. Anything else is a
defect and propagates to the transport.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Type

import pydantic
from pydantic import BaseModel

from streetview_explorer.config import Settings
from streetview_explorer.core.gallery import GalleryWriter
from streetview_explorer.core.image_store import ImageStore
from streetview_explorer.core.streetview_client import StreetViewClient
from streetview_explorer.errors import ConflictError, StreetViewError, ValidationError
from streetview_explorer.models import (
    HtmlPageRequest,
    ImageRequest,
    ListImagesRequest,
    MetadataRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    input_model: Type[BaseModel]
    error_prefix: str

    def input_schema(self) -> dict:
        return self.input_model.model_json_schema()


TOOLS: List[ToolSpec] = [
    ToolSpec(
        name="get_street_view",
        description="Fetch a Street View image based on location, coordinates, or panorama ID and save to file.",
        input_model=ImageRequest,
        error_prefix="Street View image fetch failed",
    ),
    ToolSpec(
        name="get_metadata",
        description="Fetch metadata about a Street View panorama.",
        input_model=MetadataRequest,
        error_prefix="Metadata fetch failed",
    ),
    ToolSpec(
        name="create_html_page",
        description="Create an HTML page that displays multiple Street View images as a virtual tour.",
        input_model=HtmlPageRequest,
        error_prefix="HTML page creation failed",
    ),
    ToolSpec(
        name="list_saved_images",
        description="List all saved Street View images in the output directory.",
        input_model=ListImagesRequest,
        error_prefix="Failed to list saved images",
    ),
]


def format_validation_error(exc: pydantic.ValidationError) -> str:
    """Flatten pydantic's error list into one readable line."""
    messages = []
    for error in exc.errors():
        message = error["msg"]
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        location = ".".join(str(part) for part in error["loc"])
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def parse_arguments(model: Type[BaseModel], arguments: Optional[Dict[str, Any]]) -> BaseModel:
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, dict):
        raise ValidationError("Arguments must be a JSON object")
    try:
        return model.model_validate(arguments)
    except pydantic.ValidationError as e:
        raise ValidationError(format_validation_error(e)) from None


class ToolDispatcher:
    """Routes tool name -> handler. Every mapping is listed in one place."""

    def __init__(self, settings: Settings, client: Optional[StreetViewClient] = None):
        self.settings = settings
        self.client = client or StreetViewClient(settings.google_api_key, timeout=settings.request_timeout)
        self.images = ImageStore(settings.output_dir)
        self.gallery = GalleryWriter(settings.html_dir)
        self.tools: Dict[str, ToolSpec] = {spec.name: spec for spec in TOOLS}
        self._handlers: Dict[str, Callable[[Any], dict]] = {
            "get_street_view": self.fetch_image,
            "get_metadata": self.fetch_metadata,
            "create_html_page": self.render_gallery,
            "list_saved_images": self.list_images,
        }

    def dispatch(self, name: str, arguments: Optional[Dict[str, Any]] = None) -> dict:
        """Run one tool call and return its envelope."""
        spec = self.tools.get(name)
        if spec is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ValidationError(f"Unknown tool: {name}").to_response()

        logger.info(f"Tool call: {name}")
        try:
            request = parse_arguments(spec.input_model, arguments)
            result = self._handlers[name](request)
        except StreetViewError as e:
            logger.error(f"{spec.error_prefix}: [{e.kind}] {e.message}")
            return e.to_response(spec.error_prefix)

        return {"ok": True, "result": result}

    def fetch_image(self, request: ImageRequest) -> dict:
        if self.images.exists(request.filename):
            raise ConflictError(f"File {request.filename} already exists in output directory")

        data = self.client.fetch_image(request.upstream_params())
        path = self.images.save_jpeg(request.filename, data)

        return {
            "message": "Street View image saved successfully",
            "filename": request.filename,
            "path": str(path.resolve()),
            "metadata": self.images.describe(path),
            "parameters": request.parameters_echo(),
        }

    def fetch_metadata(self, request: MetadataRequest) -> dict:
        metadata = self.client.fetch_metadata(request.upstream_params())
        return {
            "status": metadata.get("status"),
            "copyright": metadata.get("copyright"),
            "date": metadata.get("date"),
            "pano_id": metadata.get("pano_id"),
            "location": metadata.get("location"),
            "query": request.query_echo(),
        }

    def render_gallery(self, request: HtmlPageRequest) -> dict:
        if self.gallery.exists(request.filename):
            raise ConflictError(f"File {self.gallery.path_for(request.filename).name} already exists")

        path = self.gallery.write(request.filename, request.title, request.html_elements)
        return {
            "message": "HTML page created successfully",
            "filename": path.name,
            "path": str(path.resolve()),
            "title": request.title,
            "elements_count": len(request.html_elements),
        }

    def list_images(self, request: ListImagesRequest) -> dict:
        images = self.images.list_images()
        return {
            "output_directory": str(self.images.directory.resolve()),
            "total_images": len(images),
            "images": [info.to_dict() for info in images],
        }
