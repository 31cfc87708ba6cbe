import pytest
from mcp import types
from mcp.shared.exceptions import McpError

from src.picgo_mcp.tools.upload_image import (
    TOOL_NAME,
    UPLOAD_IMAGE_TOOL,
    ensure_paths_exist,
    validate_upload_args,
)


def test_validate_accepts_list_of_strings():
    args = validate_upload_args({"image_paths": ["/a.png", "/b.png"]})
    assert args.image_paths == ["/a.png", "/b.png"]


def test_validate_ignores_extra_fields():
    args = validate_upload_args({"image_paths": ["/a.png"], "album": "x"})
    assert args.image_paths == ["/a.png"]


@pytest.mark.parametrize(
    "arguments",
    [
        None,
        {},
        {"paths": ["/a.png"]},
        {"image_paths": "/a.png"},
        {"image_paths": ["/a.png", 3]},
        {"image_paths": [None]},
        {"image_paths": [["/a.png"]]},
        {"image_paths": []},
    ],
)
def test_validate_rejects_bad_shapes(arguments):
    with pytest.raises(McpError) as exc:
        validate_upload_args(arguments)

    err = exc.value.error
    assert err.code == types.INVALID_PARAMS
    assert "Expected { image_paths: string[] }" in err.message
    assert isinstance(err.data, list) and err.data


def test_validate_does_not_coerce_numbers():
    with pytest.raises(McpError):
        validate_upload_args({"image_paths": [123]})


def test_ensure_paths_exist_returns_paths_unchanged(image_files):
    assert ensure_paths_exist(image_files) == image_files


def test_ensure_paths_exist_names_first_missing_path(image_files, tmp_path):
    missing_a = str(tmp_path / "missing-a.png")
    missing_b = str(tmp_path / "missing-b.png")

    with pytest.raises(McpError) as exc:
        ensure_paths_exist([image_files[0], missing_a, missing_b])

    assert exc.value.error.code == types.INVALID_PARAMS
    assert exc.value.error.message == f"Image path does not exist: {missing_a}"


def test_tool_descriptor_shape():
    assert UPLOAD_IMAGE_TOOL.name == TOOL_NAME == "upload_image_via_picgo"
    assert UPLOAD_IMAGE_TOOL.description

    schema = UPLOAD_IMAGE_TOOL.inputSchema
    assert schema["type"] == "object"
    assert schema["required"] == ["image_paths"]
    prop = schema["properties"]["image_paths"]
    assert prop["type"] == "array"
    assert prop["items"] == {"type": "string"}
    assert prop["minItems"] == 1
    assert "absolute paths" in prop["description"]
