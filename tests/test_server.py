import asyncio
import json
from unittest.mock import patch

import mcp.types as types
import pytest

from streetview_explorer.server import create_server, to_call_result, tool_definitions


def test_tool_definitions(dispatcher):
    tools = tool_definitions(dispatcher)

    assert [tool.name for tool in tools] == [
        "get_street_view",
        "get_metadata",
        "create_html_page",
        "list_saved_images",
    ]
    page_tool = tools[2]
    assert set(page_tool.inputSchema["required"]) == {"filename", "html_elements"}


def test_success_result_is_not_an_error():
    envelope = {"ok": True, "result": {"total_images": 0, "images": []}}

    result = to_call_result(envelope)

    assert result.isError is False
    assert result.structuredContent == envelope
    assert json.loads(result.content[0].text) == envelope


def test_error_result_sets_is_error(dispatcher):
    envelope = dispatcher.dispatch("get_metadata", {})

    result = to_call_result(envelope)

    assert result.isError is True
    assert json.loads(result.content[0].text)["error"]["type"] == "validation"


def test_server_lists_tools(dispatcher):
    server = create_server(dispatcher)
    handler = server.request_handlers[types.ListToolsRequest]

    response = asyncio.run(handler(types.ListToolsRequest(method="tools/list")))

    assert len(response.root.tools) == 4


def call_tool_request(name, arguments):
    return types.CallToolRequest(
        method="tools/call",
        params=types.CallToolRequestParams(name=name, arguments=arguments),
    )


def test_call_tool_with_invalid_arguments_returns_error_result(dispatcher, mock_session):
    server = create_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    response = asyncio.run(handler(call_tool_request("get_street_view", {"filename": "x.jpg", "heading": 400})))

    result = response.root
    assert result.isError is True
    assert result.structuredContent["error"]["type"] == "validation"
    assert json.loads(result.content[0].text) == result.structuredContent
    mock_session.get.assert_not_called()


def test_call_tool_success_result(dispatcher):
    server = create_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    response = asyncio.run(handler(call_tool_request("list_saved_images", {})))

    assert response.root.isError is False
    assert response.root.structuredContent["result"]["total_images"] == 0


def test_unexpected_error_exits_the_process(dispatcher):
    server = create_server(dispatcher)
    handler = server.request_handlers[types.CallToolRequest]

    with patch.object(dispatcher, "dispatch", side_effect=RuntimeError("boom")):
        with pytest.raises(SystemExit) as excinfo:
            asyncio.run(handler(call_tool_request("list_saved_images", {})))

    assert excinfo.value.code == 1
