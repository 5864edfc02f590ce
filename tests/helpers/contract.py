from typing import Any

from pydantic import TypeAdapter

from app.schemas.response import APIResponse


def validate_response_schema(body: dict, schema: Any) -> Any:
    """Validate a success envelope and its ``data`` (wire form, camelCase keys).

    ``schema`` may be a model or a typing form such as ``List[ProgramCard]``.
    Returns the parsed data.
    """
    envelope = APIResponse[Any].model_validate(body)
    assert envelope.success is True, body
    return TypeAdapter(schema).validate_python(envelope.data)
