"""
HTTP surface for the Street View tools - the same dispatcher behind a FastAPI app.
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Body, FastAPI, HTTPException
from fastapi.responses import JSONResponse

from streetview_explorer.config import SERVER_VERSION
from streetview_explorer.dispatcher import ToolDispatcher
from streetview_explorer.errors import (
    ConfigurationError,
    ConflictError,
    FilesystemError,
    NetworkError,
    UpstreamError,
    ValidationError,
)

ERROR_STATUS = {
    cls.kind: cls.http_status
    for cls in (ValidationError, ConflictError, UpstreamError, NetworkError, FilesystemError, ConfigurationError)
}


def create_app(dispatcher: ToolDispatcher) -> FastAPI:
    app = FastAPI(
        title="Street View Explorer",
        description="Fetch Street View imagery and build virtual tour pages",
        version=SERVER_VERSION,
    )

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc)}

    @app.get("/tools")
    def list_tools():
        return [
            {"name": spec.name, "description": spec.description, "input_schema": spec.input_schema()}
            for spec in dispatcher.tools.values()
        ]

    @app.post("/tools/{name}")
    def call_tool(name: str, arguments: Optional[Dict[str, Any]] = Body(None)):
        """
        Run a tool. The response body is always the envelope; the status code mirrors its error type.
        """
        if name not in dispatcher.tools:
            raise HTTPException(status_code=404, detail=f"Unknown tool: {name}")

        envelope = dispatcher.dispatch(name, arguments)
        status_code = 200 if envelope["ok"] else ERROR_STATUS.get(envelope["error"]["type"], 500)
        return JSONResponse(status_code=status_code, content=envelope)

    return app
