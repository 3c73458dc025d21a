from typing import Any, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from jinja2 import TemplateError
from pydantic import BaseModel, ConfigDict, Field

from .common import PropshapeError, logger
from .config import Settings, load_settings
from .generator import create_schema, render_module, write_module
from .sources import fetch_json, select


class GenerateRequest(BaseModel):
    """Request model for schema generation. Give exactly one of `data` and `url`."""
    name: str = Field(..., min_length=1)
    data: Any = None
    url: Optional[str] = None
    query: Optional[str] = None
    write: bool = False


class GenerateResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool
    name: str
    schema_text: Optional[str] = Field(None, alias="schema")
    source: Optional[str] = None
    path: Optional[str] = None
    error: Optional[str] = None


_server_settings: Optional[Settings] = None

def get_settings() -> Settings:
    global _server_settings
    if _server_settings is None:
        _server_settings = load_settings()
    return _server_settings


app = FastAPI(
    title="propshape",
    description="Generate prop-types shapes from example JSON data",
    version="1.0.0"
)


@app.get("/health")
async def health():
    """Health check endpoint"""
    return {"status": "healthy"}


@app.post("/generate", response_model=GenerateResponse, response_model_by_alias=True)
def generate_schema(request: GenerateRequest):
    """
    Infer a schema from inline `data` or from the JSON served at `url`.

    The generated module is returned in `source`; with `write` set it is
    also written to the configured output directory.
    """
    has_data = 'data' in request.model_fields_set
    if has_data == (request.url is not None):
        raise HTTPException(status_code=400, detail="Give exactly one of 'data' and 'url'")

    settings = get_settings()
    try:
        value = request.data if has_data else fetch_json(request.url, timeout=settings.timeout)
        value = select(value, request.query)
        schema_text = create_schema(value)
        source = render_module(request.name, schema_text, settings.template_path())
        path = write_module(request.name, source, settings.output_dir) if request.write else None
    except (PropshapeError, TemplateError) as e:
        logger().error(f"Schema generation failed: {str(e)}")
        return GenerateResponse(success=False, name=request.name, error=str(e))

    return GenerateResponse(
        success=True,
        name=request.name,
        schema_text=schema_text,
        source=source,
        path=str(path) if path else None,
    )


def start_server(host: str = "127.0.0.1", port: int = 8000, settings: Settings = None):
    """
    Start the propshape FastAPI server

    Args:
        host: Host to bind to
        port: Port to bind to
        settings: Settings used by every request (loaded from the environment if omitted)
    """
    global _server_settings
    _server_settings = settings

    logger().info(f"Starting propshape server on {host}:{port}")

    uvicorn.run(
        app,
        host=host,
        port=port,
        log_config={
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "default": {
                    "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                },
            },
            "handlers": {
                "default": {
                    "formatter": "default",
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {
                "level": "INFO",
                "handlers": ["default"],
            },
        }
    )
