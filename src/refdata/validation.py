"""
RefData Document Validation

Validated identifiers never fail while a document is being parsed. Once
parsing is done, ``validate_fields`` walks the document and reports every
validated identifier that did not resolve, with the raw value it captured.
"""
from __future__ import annotations

import dataclasses
from typing import Any, Iterator, Optional

from pydantic import BaseModel

from .exceptions import InvalidDocumentError
from .models import ValidatedEnumID


def _is_document(value: Any) -> bool:
    if isinstance(value, BaseModel):
        return True
    return dataclasses.is_dataclass(value) and not isinstance(value, type)


def _document_fields(document: Any) -> Iterator[tuple[str, Any]]:
    if isinstance(document, BaseModel):
        for name in type(document).model_fields:
            yield name, getattr(document, name, None)
    else:
        for f in dataclasses.fields(document):
            yield f.name, getattr(document, f.name, None)


def validate_fields(document: Any) -> dict[str, Optional[str]]:
    """
    Find invalid validated identifiers in a document.

    Nested pydantic models and dataclasses are walked recursively; their
    fields are reported as ``outer.inner``. Fields that are ``None`` are not
    reported.

    Args:
        document: A pydantic model or dataclass instance

    Returns:
        Field name -> captured value for each identifier that is not valid

    Raises:
        InvalidDocumentError: If ``document`` is not a model or dataclass instance
    """
    if not _is_document(document):
        raise InvalidDocumentError(
            message="argument must be a pydantic model or dataclass instance",
            details={"type": type(document).__name__},
        )
    return _walk(document)


def _walk(document: Any) -> dict[str, Optional[str]]:
    rtn: dict[str, Optional[str]] = {}
    for name, value in _document_fields(document):
        if isinstance(value, ValidatedEnumID):
            if not value.valid():
                rtn[name] = value.captured_value()
            continue

        if _is_document(value):
            for key, captured in _walk(value).items():
                rtn[f"{name}.{key}"] = captured
    return rtn
