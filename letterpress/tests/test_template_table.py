import pytest
from pydantic import ValidationError

from letterpress.app.errors import DuplicateTemplateError, InvalidSchemaError
from letterpress.app.index.template_table import TemplateTable
from letterpress.app.schemas.schema import DataSchema
from letterpress.app.schemas.template import TemplateDefinition
from letterpress.tests.fixtures.schema_factory import (
    CUSTOMER,
    ORDER,
    RECEIPT,
    order_receipt_template,
)


def _customer_template(locale: str) -> TemplateDefinition:
    return TemplateDefinition(
        fields={"title": "Hi {{ name }}", "footer": "{{ email }}"},
        source=CUSTOMER,
        targets=(RECEIPT,),
        locale=locale,
    )


def test_duplicate_locale_for_same_data_schema_is_rejected():
    table = TemplateTable()
    table.install(ORDER, order_receipt_template("en"))

    with pytest.raises(DuplicateTemplateError) as exc_info:
        table.install(ORDER, order_receipt_template("en"))

    assert "en" in str(exc_info.value)
    assert len(table) == 1


def test_duplicate_is_detected_regardless_of_other_installs():
    table = TemplateTable()
    table.install(ORDER, order_receipt_template("en"))
    table.install(CUSTOMER, _customer_template("en"))
    table.install(ORDER, order_receipt_template("fr"))

    with pytest.raises(DuplicateTemplateError):
        table.install(ORDER, order_receipt_template("en"))


def test_same_locale_for_different_data_schemas_is_allowed():
    table = TemplateTable()
    table.install(ORDER, order_receipt_template("en"))
    table.install(CUSTOMER, _customer_template("en"))

    assert ("Order", "en") in table
    assert ("Customer", "en") in table
    assert len(table) == 2


def test_rows_preserve_installation_order():
    table = TemplateTable()
    for locale in ["en-GB", "fr", "en"]:
        table.install(ORDER, order_receipt_template(locale))

    assert list(table.row("Order")) == ["en-GB", "fr", "en"]
    assert [cell.locale for cell in table.cells()] == ["en-GB", "fr", "en"]


def test_different_data_schema_under_same_id_is_rejected():
    table = TemplateTable()
    table.install(ORDER, order_receipt_template("en"))

    other_order = DataSchema(schema_id="Order", fields={"id"})
    with pytest.raises(InvalidSchemaError):
        table.install(other_order, order_receipt_template("fr"))


def test_mismatched_source_is_accepted_at_install_time():
    table = TemplateTable()
    table.install(CUSTOMER, order_receipt_template("en"))

    assert table.get("Customer", "en").source == ORDER


def test_definition_requires_targets():
    with pytest.raises(ValidationError):
        TemplateDefinition(
            fields={"title": "x"},
            source=ORDER,
            targets=(),
            locale="en",
        )


def test_definition_dedupes_targets_and_strips_locale():
    definition = TemplateDefinition(
        fields={"title": "x"},
        source=ORDER,
        targets=(RECEIPT, RECEIPT),
        locale="  en-US ",
    )

    assert definition.target_ids == ("Receipt",)
    assert definition.locale == "en-US"
