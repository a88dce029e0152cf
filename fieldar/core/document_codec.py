"""Document Codec - deterministic bytes <-> MachineDocument translation.

Invariants:
    - encode_document is canonical: sorted keys, 2-space indent, trailing newline,
      UTF-8; equal documents always produce identical bytes
    - decode_document is strict: no string/number coercion, every field required
    - decode_document(encode_document(d)) == d for every valid document d
    - Failures surface only as EncodeError / DecodeError with the original cause

Design Decisions:
    - Serialization goes through model_dump(by_alias=True) + json.dumps rather than
      model_dump_json: model_dump_json has no sort_keys, and key order must not
      depend on field declaration order for the output to diff cleanly
    - Python-mode dump + allow_nan=False: NaN/Infinity reach json.dumps as floats
      and are rejected, instead of being silently rewritten to null
"""

import json

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from fieldar.core.document import MachineDocument
from fieldar.core.errors import DecodeError, EncodeError


def encode_document(document: MachineDocument) -> bytes:
    try:
        payload = document.model_dump(by_alias=True)
        text = json.dumps(
            payload, sort_keys=True, indent=2, ensure_ascii=False, allow_nan=False,
        )
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeError(e) from e
    return (text + "\n").encode("utf-8")


def decode_document(data: bytes) -> MachineDocument:
    try:
        return MachineDocument.model_validate_json(data, strict=True)
    except (ValidationError, UnicodeDecodeError) as e:
        raise DecodeError(e) from e
