import logging

import pytest
from fastapi.testclient import TestClient

from conftest import make_response
from streetview_explorer.config import Settings
from streetview_explorer.http_app import create_app
from streetview_explorer.main import parse_args, setup_logging


@pytest.fixture
def client(dispatcher):
    return TestClient(create_app(dispatcher))


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_tools_endpoint_lists_all_tools(client):
    response = client.get("/tools")
    assert response.status_code == 200
    tools = {tool["name"]: tool for tool in response.json()}
    assert set(tools) == {"get_street_view", "get_metadata", "create_html_page", "list_saved_images"}
    assert tools["get_street_view"]["input_schema"]["required"] == ["filename"]


def test_fetch_image_over_http(client, settings):
    response = client.post("/tools/get_street_view", json={"filename": "a.jpg", "lat_lng": "40.7,-74.0"})

    assert response.status_code == 200
    data = response.json()
    assert data["ok"] is True
    assert data["result"]["metadata"]["format"] == "jpeg"
    assert (settings.output_dir / "a.jpg").exists()


def test_conflict_maps_to_409(client):
    assert client.post("/tools/create_html_page", json={"filename": "t", "html_elements": ["<p>x</p>"]}).status_code == 200

    response = client.post("/tools/create_html_page", json={"filename": "t", "html_elements": ["<p>x</p>"]})

    assert response.status_code == 409
    assert response.json()["error"]["type"] == "conflict"


def test_validation_maps_to_400(client, mock_session):
    response = client.post("/tools/get_metadata", json={})

    assert response.status_code == 400
    assert response.json()["ok"] is False
    mock_session.get.assert_not_called()


def test_upstream_error_maps_to_502(client, mock_session):
    mock_session.get.return_value = make_response(500, reason="Internal Server Error")

    response = client.post("/tools/get_metadata", json={"pano_id": "abc"})

    assert response.status_code == 502
    assert response.json()["error"]["status_code"] == 500


def test_list_without_body(client):
    response = client.post("/tools/list_saved_images")

    assert response.status_code == 200
    assert response.json()["result"]["images"] == []


def test_unknown_tool_is_404(client):
    response = client.post("/tools/nope", json={})
    assert response.status_code == 404
    assert "Unknown tool" in response.json()["detail"]


def test_setup_logging_writes_session_file(tmp_path):
    settings = Settings(google_api_key=None, log_dir=tmp_path / "logs", log_level="debug")
    root_logger = logging.getLogger()
    saved_handlers, saved_level = root_logger.handlers[:], root_logger.level
    try:
        log_file = setup_logging(settings)
        logging.getLogger("streetview_explorer.test").info("hello from the test")
        for handler in root_logger.handlers:
            handler.flush()
        assert log_file.parent == tmp_path / "logs"
        assert log_file.name.startswith("streetview_")
        assert "StreetView-MCP: hello from the test" in log_file.read_text(encoding="utf-8")
        assert root_logger.level == logging.DEBUG
    finally:
        for handler in root_logger.handlers:
            handler.close()
        root_logger.handlers[:] = saved_handlers
        root_logger.setLevel(saved_level)


def test_parse_args_defaults_to_stdio():
    args = parse_args([])
    assert args.http is False
    assert parse_args(["--http", "--port", "9000"]).port == 9000
