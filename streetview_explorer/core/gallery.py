"""
Gallery Module - builds the HTML virtual tour pages.
"""
import html
import logging
from pathlib import Path
from string import Template
from typing import List

from streetview_explorer.errors import ConflictError, FilesystemError

logger = logging.getLogger(__name__)

PAGE_TEMPLATE = Template("""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>$title</title>
    <style>
        body {
            font-family: Arial, sans-serif;
            line-height: 1.6;
            max-width: 800px;
            margin: 0 auto;
            padding: 20px;
            color: #333;
        }
        img {
            max-width: 100%;
            height: auto;
            border-radius: 5px;
            margin: 20px 0;
        }
        h1, h2, h3 {
            color: #2c3e50;
        }
        .location {
            font-weight: bold;
            margin-bottom: 5px;
        }
        .description {
            margin-bottom: 30px;
        }
    </style>
</head>
<body>
$content
</body>
</html>""")


def html_filename(filename: str) -> str:
    """Append the .html extension when the caller left it off."""
    return filename if filename.endswith(".html") else f"{filename}.html"


def render_page(title: str, elements: List[str]) -> str:
    """
    Wrap body fragments in the tour page. Fragments go in verbatim and in order;
    only the title is escaped.
    """
    return PAGE_TEMPLATE.substitute(title=html.escape(title), content="\n".join(elements))


class GalleryWriter:
    """Writes tour pages into the HTML directory, never replacing an existing page."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def path_for(self, filename: str) -> Path:
        return self.directory / html_filename(filename)

    def exists(self, filename: str) -> bool:
        return self.path_for(filename).exists()

    def write(self, filename: str, title: str, elements: List[str]) -> Path:
        path = self.path_for(filename)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            with open(path, "x", encoding="utf-8") as handle:
                handle.write(render_page(title, elements))
        except FileExistsError:
            raise ConflictError(f"File {path.name} already exists") from None
        except OSError as e:
            logger.error(f"Error writing {path}: {str(e)}")
            raise FilesystemError(f"Could not write {path.name}: {str(e)}") from e

        logger.info(f"Created HTML page {path} with {len(elements)} elements")
        return path
