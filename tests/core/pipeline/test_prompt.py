"""Tests for schema descriptions, tool declarations and prompt rendering."""

from types import MappingProxyType

import pytest
from jinja2 import UndefinedError

from creatorkit.core.pipeline.cardinality import Cardinality
from creatorkit.core.pipeline.engine import ToolSpec
from creatorkit.core.pipeline.exceptions import ToolSpecError
from creatorkit.core.pipeline.fields import (
    EnumInput,
    IntInput,
    ListInput,
    RequestConfig,
    TextInput,
    normalize_config,
)
from creatorkit.core.pipeline.prompt import PromptRenderer, RenderedPrompt, commas
from creatorkit.core.pipeline.sanitizer import SanitizeOptions
from creatorkit.core.pipeline.schema import (
    ListField,
    ObjectListField,
    SchemaDescription,
    TextField,
    describe,
    phrases,
    resolve_fallback,
)

INPUTS = (
    TextInput("topic", required=True),
    EnumInput("platform", choices=("instagram", "tiktok")),
    ListInput("keywords"),
    IntInput("max_words", default=12, minimum=3, maximum=20),
)

VARIATIONS = ListField(
    "variations",
    cardinality=Cardinality.exact(5),
    item=SanitizeOptions(max_words="max_words", max_chars=65, title_case=True),
    fallback="Option {n}",
)

TEMPLATE = (
    "Write about {{ topic }}"
    "{% if platform %} for {{ platform }}{% else %} for any platform{% endif %}."
    "{% if keywords %} Use: {{ keywords | commas }}.{% endif %}"
)


def _config(**values) -> RequestConfig:
    return RequestConfig(tool="demo", values=MappingProxyType(values))


def _spec(**overrides) -> ToolSpec:
    fields = {
        "name": "demo",
        "title": "Demo",
        "description": "A demo tool.",
        "inputs": INPUTS,
        "outputs": (VARIATIONS,),
        "template": TEMPLATE,
    }
    fields.update(overrides)
    return ToolSpec(**fields)


# ---------------------------------------------------------------------------
# Schema description
# ---------------------------------------------------------------------------


class TestDescribe:
    def test_list_field_resolves_limits(self):
        schema = describe((VARIATIONS,), _config(max_words=10))
        (field,) = schema.fields
        assert field.kind == "string-array"
        assert field.count == (5, 5)
        assert field.limits == ("at most 10 words", "at most 65 characters", "Title Case")

    def test_render_text(self):
        text = describe((VARIATIONS,), _config(max_words=10)).render()
        assert text.startswith("Respond ONLY with a valid JSON object")
        assert (
            '- "variations": array of exactly 5 strings '
            "(at most 10 words, at most 65 characters, Title Case)"
        ) in text

    def test_object_array_render_and_json_schema(self):
        polls = ObjectListField(
            "polls",
            fields=(
                TextField("question", fallback="Question {n}?"),
                ListField("options", cardinality=Cardinality.between(2, 4), fallback="Option {n}"),
            ),
            cardinality=Cardinality.exact(2),
            key_fields=("question",),
        )
        schema = describe((polls,))
        assert '- "polls": array of exactly 2 objects, each with keys:' in schema.render()
        assert '  - "options": array of between 2 and 4 strings' in schema.render()
        assert schema.to_json_schema() == {
            "type": "object",
            "properties": {
                "polls": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "question": {"type": "string"},
                            "options": {
                                "type": "array",
                                "items": {"type": "string"},
                                "minItems": 2,
                                "maxItems": 4,
                            },
                        },
                        "required": ["question", "options"],
                    },
                    "minItems": 2,
                    "maxItems": 2,
                }
            },
            "required": ["polls"],
        }

    def test_empty_schema_is_falsy(self):
        assert not SchemaDescription(())

    def test_key_fields_must_be_declared(self):
        with pytest.raises(ToolSpecError):
            ObjectListField(
                "items",
                fields=(TextField("a", fallback="x"),),
                cardinality=Cardinality.exact(1),
                key_fields=("b",),
            )


class TestFallbacks:
    def test_resolve_template(self):
        assert resolve_fallback("Point {n}", 2, _config()) == "Point 2"
        assert resolve_fallback("About {topic}", 1, _config(topic="tea")) == "About tea"
        assert resolve_fallback(None, 1, _config()) == ""

    def test_phrases(self):
        fallback = phrases("Hooked on {topic}", "Second", then="Option {n}")
        config = _config(topic="tea")
        assert fallback(1, config) == "Hooked on tea"
        assert fallback(2, config) == "Second"
        assert fallback(3, config) == "Option 3"


# ---------------------------------------------------------------------------
# ToolSpec declaration checks
# ---------------------------------------------------------------------------


class TestToolSpec:
    def test_requires_outputs(self):
        with pytest.raises(ToolSpecError):
            _spec(outputs=())

    def test_requires_template(self):
        with pytest.raises(ToolSpecError):
            _spec(template="   ")

    def test_rejects_repeated_inputs(self):
        with pytest.raises(ToolSpecError):
            _spec(inputs=INPUTS + (TextInput("topic"),))

    def test_rejects_undeclared_references(self):
        with pytest.raises(ToolSpecError, match="undeclared"):
            _spec(inputs=INPUTS[:3])

    def test_defaults_skip_required_text(self):
        defaults = _spec().defaults()
        assert "topic" not in defaults
        assert defaults["max_words"] == 12

    def test_default_export_flattens(self):
        spec = _spec()
        assert spec.export_lines({"variations": ["a", "b"], "note": "c"}) == ["a", "b", "c"]


# ---------------------------------------------------------------------------
# PromptRenderer
# ---------------------------------------------------------------------------


class TestPromptRenderer:
    def test_absent_optionals_take_else_branch(self):
        spec = _spec()
        config = normalize_config(spec.inputs, {"topic": "tea"}, tool=spec.name)
        prompt = PromptRenderer().render(spec, config)
        assert prompt.text.startswith("Write about tea for any platform.")
        assert "Use:" not in prompt.text
        assert prompt.schema.names == ("variations",)
        assert prompt.text.endswith("outside of the JSON.")

    def test_caller_text_is_verbatim(self):
        spec = _spec()
        config = normalize_config(
            spec.inputs,
            {"topic": "<b>tea</b> & cakes", "platform": "TikTok", "keywords": ["a", "b"]},
        )
        text = PromptRenderer().render(spec, config).text
        assert text.startswith("Write about <b>tea</b> & cakes for tiktok. Use: a, b.")

    def test_schema_limits_follow_inputs(self):
        spec = _spec()
        config = normalize_config(spec.inputs, {"topic": "tea", "max_words": 7})
        assert "at most 7 words" in PromptRenderer().render(spec, config).text

    def test_compile_is_cached(self):
        renderer = PromptRenderer()
        spec = _spec()
        assert renderer.compile(spec) is renderer.compile(spec)

    def test_undeclared_variable_fails(self):
        spec = _spec(name="broken", template="About {{ subject }}")
        config = normalize_config(spec.inputs, {"topic": "tea"})
        with pytest.raises(UndefinedError):
            PromptRenderer().render(spec, config)

    def test_prompt_requires_schema(self):
        with pytest.raises(ToolSpecError):
            RenderedPrompt(text="hello", schema=SchemaDescription(()))


@pytest.mark.parametrize(
    "value, expected",
    [(None, ""), ("a, b", "a, b"), (("a", "b"), "a, b"), (3, "3")],
)
def test_commas_filter(value, expected):
    assert commas(value) == expected
