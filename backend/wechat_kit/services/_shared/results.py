"""
Tagged results for decoded platform responses.

Every remote payload is turned into either :class:`Success` (the decoded
value) or :class:`Failure` (the platform's structured error) exactly once,
here, instead of each call site inspecting an ``errcode`` field by hand.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
from xml.etree import ElementTree as ET

from marshmallow import Schema, ValidationError

from wechat_kit.schemas.common import PayReturnSchema, PlatformErrorSchema
from wechat_kit.services._shared.errors import RemoteAPIError, ResponseDecodeError

T = TypeVar("T")

PAY_SUCCESS = "SUCCESS"


@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Decoded payload of a successful call."""

    value: T


@dataclass(frozen=True, slots=True)
class Failure:
    """
    Structured error reported by the platform.

    :ivar code: ``errcode`` (JSON APIs) or ``return_code``/``err_code`` (pay).
    :ivar message: ``errmsg`` / ``return_msg`` / ``err_code_des``.
    """

    code: int | str
    message: str


ApiResult = Success[T] | Failure


def unwrap(result: ApiResult[T], *, kind: str) -> T:
    """
    Return the success value or raise :class:`RemoteAPIError`.

    :param result: Tagged result.
    :param kind: Label of the call, carried into the error.
    :raises RemoteAPIError: When ``result`` is a :class:`Failure`.
    """
    if isinstance(result, Failure):
        raise RemoteAPIError(result.code, result.message, kind=kind)
    return result.value


# --------------------------------------------------------------------------- #
# Body decoding
# --------------------------------------------------------------------------- #


def parse_xml(raw: bytes | str) -> dict[str, str]:
    """
    Decode a flat ``<xml><Key>value</Key>...</xml>`` document into a dict.

    :raises ResponseDecodeError: On malformed XML.
    """
    try:
        root = ET.fromstring(raw)
    except ET.ParseError as exc:
        raise ResponseDecodeError(f"Invalid XML body: {exc}", body=raw) from exc
    return {child.tag: (child.text or "").strip() for child in root}


def render_xml(fields: Mapping[str, Any]) -> bytes:
    """
    Encode a mapping as a flat ``<xml>`` document, skipping empty values.

    Insertion order of ``fields`` is preserved.
    """
    root = ET.Element("xml")
    for key, value in fields.items():
        if value is None or value == "":
            continue
        ET.SubElement(root, key).text = str(value)
    return ET.tostring(root, encoding="utf-8", xml_declaration=False)


def decode_body(raw: bytes) -> dict[str, Any]:
    """
    Decode a JSON or XML response body into a mapping.

    The serialization is sniffed from the first non-blank byte.

    :raises ResponseDecodeError: When the body is neither JSON nor XML.
    """
    stripped = raw.strip()
    if stripped.startswith(b"<"):
        return parse_xml(stripped)
    try:
        payload = json.loads(stripped)
    except ValueError as exc:
        raise ResponseDecodeError("Invalid JSON body", body=raw) from exc
    if not isinstance(payload, dict):
        raise ResponseDecodeError("Expected a JSON object", body=raw)
    return payload


# --------------------------------------------------------------------------- #
# Result builders
# --------------------------------------------------------------------------- #


def _load(schema: Schema, payload: dict[str, Any]) -> Any:
    try:
        return schema.load(payload)
    except ValidationError as exc:
        raise ResponseDecodeError(f"Unexpected response shape: {exc.messages}") from exc


def parse_platform_result(payload: dict[str, Any], schema: Schema) -> ApiResult[Any]:
    """Classify a JSON-API payload by its ``errcode`` and load it with ``schema``."""
    error = _load(PlatformErrorSchema(), payload)
    if error["errcode"] != 0:
        return Failure(code=error["errcode"], message=error["errmsg"])
    return Success(_load(schema, payload))


def parse_pay_result(payload: dict[str, Any], schema: Schema) -> ApiResult[Any]:
    """
    Classify a pay XML payload with the two-tier error model.

    ``return_code`` is checked first; business fields (``result_code``,
    ``err_code``) are only inspected when the transport tier succeeded.
    """
    head = _load(PayReturnSchema(), payload)
    if head["return_code"] != PAY_SUCCESS:
        return Failure(code=head["return_code"], message=head["return_msg"])
    if head["result_code"] != PAY_SUCCESS:
        return Failure(
            code=head["err_code"] or head["result_code"] or "FAIL",
            message=head["err_code_des"] or head["return_msg"],
        )
    return Success(_load(schema, payload))
