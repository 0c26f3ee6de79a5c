import io
from unittest.mock import MagicMock

import pytest
from PIL import Image

from streetview_explorer.config import Settings
from streetview_explorer.core.streetview_client import StreetViewClient
from streetview_explorer.dispatcher import ToolDispatcher


def make_image_bytes(size=(600, 400), image_format="PNG", color=(90, 140, 200)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, image_format)
    return buffer.getvalue()


def make_response(status_code=200, content=b"", json_data=None, reason="OK"):
    response = MagicMock()
    response.status_code = status_code
    response.reason = reason
    response.content = content
    if json_data is not None:
        response.json.return_value = json_data
    else:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    return response


@pytest.fixture
def settings(tmp_path):
    return Settings(
        google_api_key="test-key",
        output_dir=tmp_path / "output",
        html_dir=tmp_path / "html",
        log_dir=None,
    )


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.get.return_value = make_response(200, content=make_image_bytes())
    return session


@pytest.fixture
def dispatcher(settings, mock_session):
    client = StreetViewClient(settings.google_api_key, timeout=settings.request_timeout, session=mock_session)
    return ToolDispatcher(settings, client=client)
