import pytest

from letterpress.app.compiler.engine import TemplateEngine
from letterpress.app.compiler.template_compiler import TemplateCompiler
from letterpress.app.errors import TemplateCompilationError
from letterpress.app.index.schema_index import SchemaIndex
from letterpress.app.schemas.schema import Encoding
from letterpress.tests.fixtures.schema_factory import (
    EMAIL,
    NOTICE,
    ORDER,
    RECEIPT,
    SMS,
    order_receipt_template,
)


def _index(*documents):
    index = SchemaIndex()
    for document in documents:
        index.install(document)
    return index


# ------------------------------------------------------------------
# Engine
# ------------------------------------------------------------------

def test_engine_extracts_variable_roots():
    engine = TemplateEngine()

    fragment = engine.compile(
        "{{ order.id }} "
        "{% for item in items %}{{ item.name }}{% endfor %} "
        "{% set label = 'x' %}{{ label }} "
        "{{ range(3) | list }}",
        Encoding.PLAIN_TEXT,
    )

    assert fragment.variables == frozenset({"order", "items", "range"})
    assert fragment.builtins == frozenset({"range"})


def test_engine_reports_unknown_filter_as_compilation_error():
    engine = TemplateEngine()

    with pytest.raises(TemplateCompilationError) as exc_info:
        engine.compile("{{ id | nosuchfilter }}", Encoding.HTML)

    assert "nosuchfilter" in exc_info.value.message


def test_engine_reports_syntax_errors_with_line_number():
    engine = TemplateEngine()

    with pytest.raises(TemplateCompilationError) as exc_info:
        engine.compile("line one\n{{ id ", Encoding.HTML)

    assert exc_info.value.lineno == 2


def test_html_escapes_and_plain_text_does_not():
    engine = TemplateEngine()

    html = engine.compile("<p>{{ name }}</p>", Encoding.HTML)
    text = engine.compile("<p>{{ name }}</p>", Encoding.PLAIN_TEXT)

    assert html.render({"name": "<b>Ann</b>"}) == "<p>&lt;b&gt;Ann&lt;/b&gt;</p>"
    assert text.render({"name": "<b>Ann</b>"}) == "<p><b>Ann</b></p>"


# ------------------------------------------------------------------
# Compiler
# ------------------------------------------------------------------

def test_nullable_fields_are_backfilled_with_none():
    compiler = TemplateCompiler()
    definition = order_receipt_template(fields={"title": "Order {{ id }}"})

    compiled = compiler.compile(definition, _index(RECEIPT))

    assert set(compiled.fields) == {"title", "footer"}
    assert compiled.fields["footer"] is None
    assert compiled.authored_fields() == ("title",)
    assert compiled.referenced_variables == frozenset({"id"})


def test_backfill_covers_every_target():
    compiler = TemplateCompiler()
    definition = order_receipt_template(
        fields={"title": "Order {{ id }}", "body": "{{ total }}"},
        targets=(RECEIPT, NOTICE),
    )

    compiled = compiler.compile(definition, _index(RECEIPT, NOTICE))

    assert compiled.fields["footer"] is None
    assert compiled.fields["title"] is not None


def test_descriptor_encoding_overrides_default():
    compiler = TemplateCompiler(default_encoding=Encoding.HTML)
    definition = order_receipt_template(
        fields={"body": "{{ id }}"},
        targets=(SMS,),
    )

    compiled = compiler.compile(definition, _index(SMS))

    assert compiled.fields["body"].encoding is Encoding.PLAIN_TEXT


def test_default_encoding_applies_without_override():
    compiler = TemplateCompiler(default_encoding=Encoding.PLAIN_TEXT)
    definition = order_receipt_template(
        fields={
            "subject": "Order {{ id }}",
            "body": "<p>{{ total }}</p>",
            "button_url": "https://example.com/{{ id }}",
        },
        targets=(EMAIL,),
    )

    compiled = compiler.compile(definition, _index(EMAIL))

    assert compiled.fields["body"].encoding is Encoding.HTML
    assert compiled.fields["button_url"].encoding is Encoding.PLAIN_TEXT


def test_every_failing_field_is_reported():
    compiler = TemplateCompiler()
    definition = order_receipt_template(
        fields={"title": "{{ id ", "footer": "{% if total %}"},
    )

    with pytest.raises(TemplateCompilationError) as exc_info:
        compiler.compile(definition, _index(RECEIPT))

    failed = sorted(failure.field for failure in exc_info.value.failures)
    assert failed == ["footer", "title"]
    assert ORDER.schema_id in str(exc_info.value)
