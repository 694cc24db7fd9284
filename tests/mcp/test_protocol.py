"""Unit tests for MCP protocol models."""

import pytest
from pydantic import ValidationError

from toolbox_mcp.mcp.protocol import (
    MCP_PROTOCOL_VERSION,
    CallToolRequestParams,
    CallToolResult,
    GetPromptResult,
    Implementation,
    InitializeResult,
    JSONRPCRequest,
    ListToolsResult,
    Method,
    Prompt,
    PromptArgument,
    ReadResourceResult,
    Resource,
    TextContent,
    TextResourceContents,
    Tool,
)


def test_protocol_version() -> None:
    """Protocol version is 2025-11-25."""
    assert MCP_PROTOCOL_VERSION == "2025-11-25"


def test_method_lookup_known_and_unknown() -> None:
    """Method.lookup maps wire names to members and returns None otherwise."""
    assert Method.lookup("tools/list") is Method.TOOLS_LIST
    assert Method.lookup("prompts/get") is Method.PROMPTS_GET
    assert Method.lookup("tools/delete") is None
    assert Method.lookup("") is None


def test_request_id_keeps_json_type() -> None:
    """Numeric ids stay int and string ids stay str."""
    assert JSONRPCRequest.model_validate({"id": 7, "method": "ping"}).id == 7
    assert isinstance(JSONRPCRequest.model_validate({"id": 7, "method": "ping"}).id, int)
    assert JSONRPCRequest.model_validate({"id": "7", "method": "ping"}).id == "7"


def test_request_rejects_bool_and_float_ids() -> None:
    """Booleans and fractional numbers are not request ids."""
    with pytest.raises(ValidationError):
        JSONRPCRequest.model_validate({"id": True, "method": "ping"})
    with pytest.raises(ValidationError):
        JSONRPCRequest.model_validate({"id": 1.5, "method": "ping"})


def test_request_defaults_jsonrpc_version() -> None:
    """A request without jsonrpc is accepted as 2.0."""
    req = JSONRPCRequest.model_validate({"id": 1, "method": "ping"})
    assert req.jsonrpc == "2.0"
    assert req.params is None


def test_implementation_serialization() -> None:
    """Implementation omits unset optional fields."""
    impl = Implementation(name="test", version="1.0.0", title="Test")
    d = impl.model_dump(by_alias=True, exclude_none=True)
    assert d == {"name": "test", "version": "1.0.0", "title": "Test"}


def test_tool_serialization() -> None:
    """Tool has name, description, inputSchema."""
    tool = Tool(
        name="echo",
        description="Echo back",
        input_schema={"type": "object", "properties": {"message": {"type": "string"}}},
    )
    d = tool.model_dump(by_alias=True, exclude_none=True)
    assert d["name"] == "echo"
    assert d["description"] == "Echo back"
    assert d["inputSchema"]["type"] == "object"


def test_tool_is_frozen() -> None:
    """Catalog descriptors cannot be mutated."""
    tool = Tool(name="t", description="d", input_schema={"type": "object"})
    with pytest.raises(ValidationError):
        tool.name = "other"  # type: ignore[misc]


def test_text_content() -> None:
    """TextContent has type text and text field."""
    tc = TextContent(text="hello")
    assert tc.model_dump(by_alias=True) == {"type": "text", "text": "hello"}


def test_call_tool_result_from_text() -> None:
    """CallToolResult.from_text builds one text block and sets isError."""
    ok = CallToolResult.from_text("ok")
    assert ok.model_dump(by_alias=True) == {
        "content": [{"type": "text", "text": "ok"}],
        "isError": False,
    }
    failed = CallToolResult.from_text("boom", is_error=True)
    assert failed.is_error is True


def test_call_tool_request_params_defaults_arguments() -> None:
    """CallToolRequestParams defaults arguments to an empty dict."""
    params = CallToolRequestParams(name="get_system_info")
    assert params.arguments == {}


def test_call_tool_request_params_requires_name() -> None:
    with pytest.raises(ValidationError):
        CallToolRequestParams.model_validate({"arguments": {}})


def test_resource_uses_mime_type_alias() -> None:
    resource = Resource(uri="file:///README.md", name="README", mime_type="text/markdown")
    d = resource.model_dump(by_alias=True, exclude_none=True)
    assert d == {"uri": "file:///README.md", "name": "README", "mimeType": "text/markdown"}


def test_read_resource_result_omits_is_error_when_unset() -> None:
    result = ReadResourceResult(
        contents=[TextResourceContents(uri="file:///a", text="hello")]
    )
    d = result.model_dump(by_alias=True, exclude_none=True)
    assert "isError" not in d
    assert d["contents"][0] == {"uri": "file:///a", "mimeType": "text/plain", "text": "hello"}


def test_prompt_serializes_arguments_list() -> None:
    prompt = Prompt(
        name="p",
        description="d",
        arguments=(PromptArgument(name="id", description="x", type="number", required=False),),
    )
    d = prompt.model_dump(by_alias=True, exclude_none=True)
    assert list(d["arguments"]) == [
        {"name": "id", "description": "x", "type": "number", "required": False}
    ]


def test_get_prompt_result_keeps_arguments() -> None:
    result = GetPromptResult(prompt="text", arguments={"id": 3, "extra": None})
    assert result.model_dump(exclude_unset=True) == {
        "prompt": "text",
        "arguments": {"id": 3, "extra": None},
    }


def test_initialize_result_parses_from_camelcase() -> None:
    """InitializeResult can be parsed from server response (camelCase keys)."""
    raw = {
        "protocolVersion": "2025-11-25",
        "capabilities": {"tools": {"listChanged": False}},
        "serverInfo": {"name": "test-server", "version": "1.0.0"},
    }
    result = InitializeResult.model_validate(raw)
    assert result.protocol_version == "2025-11-25"
    assert result.server_info.name == "test-server"
    assert result.capabilities["tools"]["listChanged"] is False


def test_list_tools_result() -> None:
    tool = Tool(name="t", description="d", input_schema={"type": "object"})
    result = ListToolsResult(tools=[tool])
    assert [t.name for t in result.tools] == ["t"]
