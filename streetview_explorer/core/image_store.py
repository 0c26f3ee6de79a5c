"""
Image Store Module - write-once JPEG storage and listing for the output directory.
"""
import io
import logging
from pathlib import Path
from typing import List

from PIL import Image

from streetview_explorer.config import IMAGE_EXTENSIONS, JPEG_QUALITY
from streetview_explorer.core.utils import format_kb, iso_timestamp
from streetview_explorer.errors import ConflictError, FilesystemError, UpstreamError
from streetview_explorer.models import ImageInfo

logger = logging.getLogger(__name__)


class ImageStore:
    """Saved Street View images in a single directory.

    Files are never overwritten: an existing name is a conflict.
    """

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, filename: str) -> Path:
        return self.directory / filename

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).exists()

    def ensure_directory(self) -> None:
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create output directory {self.directory}: {str(e)}")
            raise FilesystemError(f"Could not create output directory: {str(e)}") from e

    def save_jpeg(self, filename: str, data: bytes) -> Path:
        """
        Decode image bytes, re-encode them as JPEG and write a new file.

        Args:
            filename: Target name inside the store directory
            data: Raw image bytes as returned by the API

        Returns:
            Path of the written file
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                if img.mode not in ("RGB", "L"):
                    img = img.convert("RGB")
                buffer = io.BytesIO()
                img.save(buffer, "JPEG", quality=JPEG_QUALITY)
        except (OSError, Image.DecompressionBombError) as e:
            logger.error(f"Could not decode image data: {str(e)}")
            raise UpstreamError("API returned data that is not a decodable image") from e

        self.ensure_directory()
        path = self.path_for(filename)
        try:
            with open(path, "xb") as handle:
                handle.write(buffer.getvalue())
        except FileExistsError:
            raise ConflictError(f"File {filename} already exists in output directory") from None
        except OSError as e:
            logger.error(f"Error writing {path}: {str(e)}")
            raise FilesystemError(f"Could not write {filename}: {str(e)}") from e

        logger.info(f"Saved image to {path}")
        return path

    def describe(self, path: Path) -> dict:
        """Re-read a saved file and report its pixel size, format and byte size."""
        try:
            size_bytes = path.stat().st_size
            with Image.open(path) as img:
                width, height = img.size
                image_format = (img.format or "").lower()
        except OSError as e:
            logger.error(f"Error reading back {path}: {str(e)}")
            raise FilesystemError(f"Could not read saved image {path.name}: {str(e)}") from e

        return {
            "width": width,
            "height": height,
            "dimensions": f"{width}x{height}",
            "format": image_format,
            "size": format_kb(size_bytes),
            "size_bytes": size_bytes,
        }

    def list_images(self) -> List[ImageInfo]:
        """List image files in the store, most recently modified first."""
        self.ensure_directory()
        try:
            candidates = [
                entry for entry in self.directory.iterdir()
                if entry.name.lower().endswith(IMAGE_EXTENSIONS) and entry.is_file()
            ]
        except OSError as e:
            logger.error(f"Error listing {self.directory}: {str(e)}")
            raise FilesystemError(f"Could not list output directory: {str(e)}") from e

        entries = []
        for entry in candidates:
            try:
                stat = entry.stat()
            except FileNotFoundError:
                logger.warning(f"{entry.name} disappeared while listing, skipping")
                continue
            except OSError as e:
                raise FilesystemError(f"Could not stat {entry.name}: {str(e)}") from e

            info = {
                "filename": entry.name,
                "size": format_kb(stat.st_size),
                "size_bytes": stat.st_size,
                "created": iso_timestamp(getattr(stat, "st_birthtime", stat.st_ctime)),
                "modified": iso_timestamp(stat.st_mtime),
            }
            try:
                with Image.open(entry) as img:
                    info["width"], info["height"] = img.size
                    info["dimensions"] = f"{img.size[0]}x{img.size[1]}"
                    info["format"] = (img.format or "").lower()
            except (OSError, Image.DecompressionBombError) as e:
                logger.warning(f"Could not read image header of {entry.name}: {str(e)}")

            entries.append((stat.st_mtime, ImageInfo(**info)))

        entries.sort(key=lambda item: item[0], reverse=True)
        return [info for _, info in entries]
