"""
Per-document schema index.

Records every installed DocumentSchema with its own field descriptors.
Descriptors are indexed per document, so two documents declaring the same
field name keep their own nullability and encoding. The field-name view
(``declaring``) lists every document that declares a given name.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from letterpress.app.errors import InvalidSchemaError
from letterpress.app.schemas.schema import DocumentSchema, Encoding, FieldDescriptor

logger = logging.getLogger(__name__)


class SchemaIndex:
    """
    Installed document schemas, keyed by schema id in installation order.
    """

    def __init__(self) -> None:
        self._documents: Dict[str, DocumentSchema] = {}
        self._by_field: Dict[str, List[Tuple[DocumentSchema, FieldDescriptor]]] = {}

    # ------------------------------------------------------------------
    # Installation
    # ------------------------------------------------------------------

    def install(self, document: DocumentSchema) -> None:
        """
        Record a document schema.

        Re-installing an identical schema is a no-op. Any other problem
        raises InvalidSchemaError and leaves the index untouched.
        """
        existing = self._documents.get(document.schema_id)
        if existing is not None:
            if existing == document:
                logger.debug("Document schema %s already installed", document.schema_id)
                return
            raise InvalidSchemaError(
                f"Document schema [{document.schema_id}] is already installed "
                "with different fields."
            )

        if not document.fields:
            raise InvalidSchemaError(
                f"No fields included for document schema [{document.schema_id}]"
            )

        names = document.field_names
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise InvalidSchemaError(
                f"Document schema [{document.schema_id}] declares duplicate "
                f"fields {duplicates}"
            )

        if document.model is not None:
            model_fields = set(document.model.model_fields)
            if model_fields != set(names):
                raise InvalidSchemaError(
                    f"Document schema [{document.schema_id}] fields {sorted(names)} "
                    f"do not match model {document.model.__name__} fields "
                    f"{sorted(model_fields)}"
                )

        self._documents[document.schema_id] = document
        for descriptor in document.fields:
            self._by_field.setdefault(descriptor.name, []).append(
                (document, descriptor)
            )

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def __contains__(self, document: object) -> bool:
        if isinstance(document, DocumentSchema):
            return self._documents.get(document.schema_id) == document
        return document in self._documents

    def __iter__(self) -> Iterator[DocumentSchema]:
        return iter(self._documents.values())

    def __len__(self) -> int:
        return len(self._documents)

    def is_empty(self) -> bool:
        return not self._documents

    def get(self, schema_id: str) -> Optional[DocumentSchema]:
        return self._documents.get(schema_id)

    def descriptors(self, schema_id: str) -> Tuple[FieldDescriptor, ...]:
        document = self._documents.get(schema_id)
        return document.fields if document is not None else ()

    def declaring(self, field_name: str) -> List[Tuple[DocumentSchema, FieldDescriptor]]:
        """
        Every installed document declaring ``field_name``, with its descriptor.
        """
        return list(self._by_field.get(field_name, ()))

    def effective_encodings(
        self,
        field_name: str,
        targets: Sequence[DocumentSchema],
        default: Encoding,
    ) -> List[Tuple[str, Encoding]]:
        """
        (document id, encoding) for every target declaring ``field_name``,
        in declaration order. A descriptor without an override gets
        ``default``.
        """
        effective: List[Tuple[str, Encoding]] = []
        for target in targets:
            descriptor = target.descriptor(field_name)
            if descriptor is not None:
                effective.append((target.schema_id, descriptor.encoding or default))
        return effective

    def resolve_encoding(
        self,
        field_name: str,
        targets: Sequence[DocumentSchema],
        default: Encoding,
    ) -> Encoding:
        """
        Encoding for ``field_name`` when rendering into ``targets``.

        The targets' effective encodings when they agree; HTML when they
        disagree; ``default`` when no target declares the field.
        """
        encodings = {enc for _, enc in self.effective_encodings(field_name, targets, default)}
        if not encodings:
            return default
        if len(encodings) > 1:
            return Encoding.HTML
        return encodings.pop()

    def conflicting_encodings(
        self,
        field_name: str,
        targets: Sequence[DocumentSchema],
        default: Encoding,
    ) -> List[Tuple[str, Encoding]]:
        """
        Effective encodings of ``field_name`` across ``targets``.

        Returns an empty list unless at least two targets disagree.
        """
        declared = self.effective_encodings(field_name, targets, default)
        if len({encoding for _, encoding in declared}) > 1:
            return declared
        return []
