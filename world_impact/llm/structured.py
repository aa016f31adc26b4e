# world_impact/llm/structured.py

"""
Structured generation.

Both pipeline stages use the same contract, generate(**prompt_vars) ->
schema instance, parameterized by model, prompt and schema. The backend is
asked for output conforming to the schema; whatever shape comes back is
normalized at this boundary before it is validated.
"""

from typing import Any, Generic, Mapping, Type, TypeVar

from langchain_core.runnables import Runnable
from pydantic import BaseModel

SchemaT = TypeVar("SchemaT", bound=BaseModel)

WRAPPER_KEY = "properties"

# Keys a backend may echo around the fields when it returns the schema envelope
SCHEMA_ENVELOPE_KEYS = frozenset(
    {"type", "properties", "required", "title", "description", "additionalProperties", "$schema"}
)


def flatten_structured_output(result: Any) -> dict:
    """
    Normalize structured LLM output to a plain dict of fields.

    Some backends return the object directly, others nest it under a
    "properties" key (echoing the JSON schema). One wrapper layer is removed.

    Raises:
        ValueError: If the result is empty or not object-shaped.
    """
    if result is None:
        raise ValueError("Model returned no output")

    if isinstance(result, BaseModel):
        result = result.model_dump()

    if not isinstance(result, Mapping):
        raise ValueError(f"Expected an object, got {type(result).__name__}")

    if not result:
        raise ValueError("Model returned an empty object")

    wrapped = result.get(WRAPPER_KEY)
    if isinstance(wrapped, Mapping) and SCHEMA_ENVELOPE_KEYS.issuperset(result):
        # {"properties": {...}} or {"type": "object", "properties": {...}, "required": [...]}
        return dict(wrapped)

    return dict(result)


class StructuredGenerator(Generic[SchemaT]):
    """
    One structured-generation backend: a runnable chain plus its output schema.

    Args:
        chain: Runnable taking the prompt variables (prompt | llm.with_structured_output).
        schema: Pydantic model the output must validate against.
        name: Stage name used in logs.
    """

    def __init__(self, chain: Runnable, schema: Type[SchemaT], name: str):
        self.chain = chain
        self.schema = schema
        self.name = name

    def generate(self, **prompt_vars: Any) -> SchemaT:
        """Invoke the chain once and validate the normalized output."""
        raw = self.chain.invoke(prompt_vars)
        return self.schema.model_validate(flatten_structured_output(raw))
