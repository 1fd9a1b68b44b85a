from typing import Any, Dict, List, Optional

import pytest
from pydantic import BaseModel

from tool_bridge import BridgeConfig, InvalidInputError, ToolDispatcher
from tool_bridge.tools import SchemaValidator


class Node(BaseModel):
    value: int
    child: Optional["Node"] = None


def _walk(node: Any) -> List[Dict[str, Any]]:
    found = []
    if isinstance(node, dict):
        found.append(node)
        for value in node.values():
            found.extend(_walk(value))
    elif isinstance(node, list):
        for item in node:
            found.extend(_walk(item))
    return found


@pytest.fixture
def definitions(config: BridgeConfig, silent_transport: Any) -> Dict[str, Any]:
    return {d.name: d for d in ToolDispatcher(config, silent_transport).tool_definitions()}


def test_every_tool_is_described(definitions: Dict[str, Any]) -> None:
    assert len(definitions) == 11
    assert all(d.description for d in definitions.values())


def test_schemas_are_flat(definitions: Dict[str, Any]) -> None:
    for definition in definitions.values():
        for node in _walk(definition.parameters):
            assert "$defs" not in node
            assert "$ref" not in node
            assert "title" not in node


def test_optional_fields_are_collapsed(definitions: Dict[str, Any]) -> None:
    params = definitions["create_redmine_issue"].parameters

    assert params["required"] == ["subject"]
    assert params["properties"]["description"]["type"] == "string"
    assert params["properties"]["estimated_hours"]["type"] == "number"
    assert params["properties"]["priority_id"]["default"] == 4


def test_inline_position_is_an_object(definitions: Dict[str, Any]) -> None:
    params = definitions["gitlab_post_inline_comment"].parameters

    assert params["properties"]["position"]["type"] == "object"
    assert set(params["required"]) == {"project_id", "mr_iid", "body", "position"}


def test_recursive_models_are_rejected() -> None:
    with pytest.raises(InvalidInputError):
        SchemaValidator.parameters_for(Node)


def test_free_form_objects_stay_open(definitions: Dict[str, Any]) -> None:
    params = definitions["mcp_call_tool"].parameters

    assert params["additionalProperties"] is False
    assert params["properties"]["arguments"].get("additionalProperties", True) is not False
