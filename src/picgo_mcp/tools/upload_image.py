"""
upload_image_via_picgo tool definition.

Holds everything that happens BEFORE any network I/O:
- the args schema (single source for both validation and the advertised inputSchema)
- shape validation of the raw, untyped arguments
- existence check of every referenced path
"""

from __future__ import annotations

import os
from typing import Any, List

from mcp import types
from mcp.shared.exceptions import McpError
from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError

from src.picgo_mcp.logging.logger import setup_logger

logger = setup_logger(__name__)

TOOL_NAME = "upload_image_via_picgo"
TOOL_DESCRIPTION = "Uploads one or more images using the running PicGo server application."


# No class docstring: pydantic would publish it as the schema description.
class UploadImageArgs(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    image_paths: List[StrictStr] = Field(
        ...,
        strict=True,
        min_length=1,
        description="An array of absolute paths to the image files to upload.",
    )


def _invalid_params(message: str, data: Any = None) -> McpError:
    return McpError(types.ErrorData(code=types.INVALID_PARAMS, message=message, data=data))


def validate_upload_args(arguments: Any) -> UploadImageArgs:
    """
    Check raw tool arguments against UploadImageArgs.

    Raises:
        McpError(INVALID_PARAMS): not an object, `image_paths` missing, not a
            list, empty, or holding a non-string element.
    """
    try:
        return UploadImageArgs.model_validate(arguments)
    except ValidationError as e:
        errors = e.errors(include_url=False, include_context=False, include_input=False)
        logger.warning("Tool schema validation failed | tool=%s | errors=%s", TOOL_NAME, errors)
        raise _invalid_params(
            f"Invalid arguments for {TOOL_NAME}. Expected {{ image_paths: string[] }}.",
            data=errors,
        ) from e


def ensure_paths_exist(image_paths: List[str]) -> List[str]:
    """
    Fail on the first path that does not exist; nothing is forwarded in that case.

    Returns the same list unchanged when all paths exist.
    """
    for img_path in image_paths:
        if not os.path.exists(img_path):
            logger.warning("Image path does not exist | tool=%s | path=%s", TOOL_NAME, img_path)
            raise _invalid_params(f"Image path does not exist: {img_path}")
    return image_paths


def _input_schema() -> dict:
    schema = UploadImageArgs.model_json_schema()
    # Titles are pydantic noise for MCP clients.
    schema.pop("title", None)
    for prop in schema.get("properties", {}).values():
        prop.pop("title", None)
    return schema


UPLOAD_IMAGE_TOOL = types.Tool(
    name=TOOL_NAME,
    description=TOOL_DESCRIPTION,
    inputSchema=_input_schema(),
)
