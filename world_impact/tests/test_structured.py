import pytest
from langchain_core.runnables import RunnableLambda

from world_impact.llm.structured import StructuredGenerator, flatten_structured_output
from world_impact.models.schemas import BiographySummary


def test_flatten_passes_plain_objects_through():
    assert flatten_structured_output({"name": "Ada", "summary": "x"}) == {"name": "Ada", "summary": "x"}


def test_flatten_unwraps_properties_envelope():
    wrapped = {"type": "object", "properties": {"name": "Ada", "summary": "x"}}
    assert flatten_structured_output(wrapped) == {"name": "Ada", "summary": "x"}


def test_flatten_unwraps_full_schema_envelope():
    envelope = {
        "type": "object",
        "properties": {"name": "Ada", "summary": "x"},
        "required": ["name", "summary"],
    }
    assert flatten_structured_output(envelope) == {"name": "Ada", "summary": "x"}


def test_flatten_keeps_real_properties_field():
    """A genuine field called "properties" next to other fields is not an envelope."""
    result = {"name": "Ada", "properties": {"a": 1}, "summary": "x"}
    assert flatten_structured_output(result) == result


def test_flatten_dumps_pydantic_models():
    summary = BiographySummary(name="Ada Lovelace", summary="Mathematician.")
    assert flatten_structured_output(summary)["name"] == "Ada Lovelace"


@pytest.mark.parametrize("result", [None, {}, "text", ["a"]])
def test_flatten_rejects_unusable_output(result):
    with pytest.raises(ValueError):
        flatten_structured_output(result)


def test_generator_validates_normalized_output():
    seen = {}

    def fake_model(prompt_vars):
        seen.update(prompt_vars)
        return {"properties": {"name": "Ada Lovelace", "summary": "Mathematician."}}

    generator = StructuredGenerator(RunnableLambda(fake_model), BiographySummary, name="summarization")

    summary = generator.generate(person_name="Ada Lovelace", biography="...")

    assert isinstance(summary, BiographySummary)
    assert summary.name == "Ada Lovelace"
    assert seen == {"person_name": "Ada Lovelace", "biography": "..."}


def test_generator_raises_on_schema_mismatch():
    generator = StructuredGenerator(
        RunnableLambda(lambda _: {"birth_place": "London"}), BiographySummary, name="summarization"
    )
    with pytest.raises(ValueError):
        generator.generate(person_name="Ada Lovelace", biography="...")


def test_generator_accepts_schema_envelope_output():
    envelope = {
        "type": "object",
        "title": "BiographySummary",
        "properties": {"name": "Ada Lovelace", "summary": "Mathematician."},
        "required": ["name", "summary"],
    }
    generator = StructuredGenerator(RunnableLambda(lambda _: envelope), BiographySummary, name="summarization")

    assert generator.generate(person_name="Ada Lovelace", biography="...").name == "Ada Lovelace"
