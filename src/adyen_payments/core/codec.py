"""
SOAP envelope encoding and reply decoding for the gateway's actions.

Requests are described as ordered ``(name, value)`` pairs because the
gateway validates element order against its schema. Replies are checked
once, here, against :data:`REPLY_SCHEMAS`, so services can read fields
without probing the XML themselves.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from .errors import ParseError
from .money import Amount

__all__ = [
    "ActionReply",
    "ActionSchema",
    "COMMON_NS",
    "Fault",
    "PAYMENT_NS",
    "RECURRING_NS",
    "REPLY_SCHEMAS",
    "ReplyEnvelope",
    "SOAP_NS",
    "decode",
    "encode",
]

SOAP_NS = "http://schemas.xmlsoap.org/soap/envelope/"
PAYMENT_NS = "http://payment.services.adyen.com"
RECURRING_NS = "http://recurring.services.adyen.com"
COMMON_NS = "http://common.services.adyen.com"
_XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"

for _prefix, _uri in (
    ("soap", SOAP_NS),
    ("payment", PAYMENT_NS),
    ("recurring", RECURRING_NS),
    ("common", COMMON_NS),
    ("xsi", _XSI_NS),
):
    ET.register_namespace(_prefix, _uri)

Fields = Sequence[Tuple[str, Any]]


@dataclass(frozen=True)
class ActionSchema:
    namespace: str
    request_element: str
    result_element: str
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    lists: Tuple[str, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        return self.required + self.optional


_AUTHORISE = ActionSchema(
    namespace=PAYMENT_NS,
    request_element="paymentRequest",
    result_element="paymentResult",
    required=("pspReference", "resultCode"),
    optional=(
        "authCode",
        "refusalReason",
        "fraudResult",
        "additionalData",
        "issuerUrl",
        "md",
        "paRequest",
        "dccAmount",
        "dccSignature",
    ),
)


def _modification(action: str) -> ActionSchema:
    return ActionSchema(
        namespace=PAYMENT_NS,
        request_element="modificationRequest",
        result_element=f"{action}Result",
        required=("pspReference", "response"),
    )


REPLY_SCHEMAS: Dict[str, ActionSchema] = {
    "authorise": _AUTHORISE,
    "capture": _modification("capture"),
    "refund": _modification("refund"),
    "cancel": _modification("cancel"),
    "cancelOrRefund": _modification("cancelOrRefund"),
    "listRecurringDetails": ActionSchema(
        namespace=RECURRING_NS,
        request_element="request",
        result_element="result",
        optional=("creationDate", "details", "lastKnownShopperEmail", "shopperReference"),
        lists=("details",),
    ),
    "disable": ActionSchema(
        namespace=RECURRING_NS,
        request_element="request",
        result_element="result",
        required=("response",),
    ),
}


@dataclass(frozen=True)
class ActionReply:
    """
    A decoded action reply.

    Every field of the action's schema is present in ``fields``; optional
    fields the gateway left out map to ``None``.
    """

    action: str
    fields: Mapping[str, Any]

    def get(self, name: str) -> Any:
        return self.fields.get(name)


@dataclass(frozen=True)
class Fault:
    code: str
    message: str


ReplyEnvelope = Union[ActionReply, Fault]


def _schema(action: str) -> ActionSchema:
    try:
        return REPLY_SCHEMAS[action]
    except KeyError:
        raise ValueError(f"Unknown gateway action '{action}'") from None


def _qname(namespace: str, name: str) -> str:
    return f"{{{namespace}}}{name}"


def _format_scalar(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _append(parent: ET.Element, namespace: str, name: str, value: Any) -> None:
    if value is None:
        return
    element = ET.SubElement(parent, _qname(namespace, name))
    if isinstance(value, Amount):
        ET.SubElement(element, _qname(COMMON_NS, "currency")).text = value.currency
        ET.SubElement(element, _qname(COMMON_NS, "value")).text = value.to_decimal_string()
    elif isinstance(value, (list, tuple)):
        for child_name, child_value in value:
            _append(element, namespace, child_name, child_value)
    else:
        element.text = _format_scalar(value)


def encode(action: str, fields: Fields) -> bytes:
    """
    Serialize ``fields`` into a SOAP envelope invoking ``action``.

    ``None`` values are left out entirely; empty strings produce empty
    elements.
    """
    schema = _schema(action)
    envelope = ET.Element(_qname(SOAP_NS, "Envelope"))
    ET.SubElement(envelope, _qname(SOAP_NS, "Header"))
    body = ET.SubElement(envelope, _qname(SOAP_NS, "Body"))
    call = ET.SubElement(body, _qname(schema.namespace, action))
    request = ET.SubElement(call, _qname(schema.namespace, schema.request_element))
    for name, value in fields:
        _append(request, schema.namespace, name, value)
    return ET.tostring(envelope, encoding="utf-8", xml_declaration=True)


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _is_nil(element: ET.Element) -> bool:
    return element.get(_qname(_XSI_NS, "nil")) in ("true", "1")


def _element_value(element: ET.Element) -> Any:
    if _is_nil(element):
        return None
    children = list(element)
    if not children:
        return (element.text or "").strip()
    values: Dict[str, Any] = {}
    for child in children:
        name = _local_name(child.tag)
        value = _element_value(child)
        if name in values:
            existing = values[name]
            if not isinstance(existing, list):
                values[name] = existing = [existing]
            existing.append(value)
        else:
            values[name] = value
    return values


def _list_value(element: ET.Element) -> Optional[List[Any]]:
    if _is_nil(element):
        return None
    return [_element_value(child) for child in element]


def _find_child(parent: ET.Element, local_name: str) -> Optional[ET.Element]:
    for child in parent:
        if _local_name(child.tag) == local_name:
            return child
    return None


def _decode_fault(element: ET.Element) -> Fault:
    code = _find_child(element, "faultcode")
    message = _find_child(element, "faultstring")
    if code is None or message is None:
        raise ParseError("SOAP fault is missing faultcode or faultstring")
    return Fault(code=(code.text or "").strip(), message=(message.text or "").strip())


def decode(action: str, document: bytes | str) -> ReplyEnvelope:
    """
    Decode a reply to ``action`` into an :class:`ActionReply` or :class:`Fault`.

    Raises :class:`ParseError` when the document is not XML, is not a SOAP
    envelope, does not answer ``action`` or lacks a required field.
    """
    schema = _schema(action)
    try:
        root = ET.fromstring(document)
    except ET.ParseError as exc:
        raise ParseError(f"Reply to {action} is not well-formed XML: {exc}") from exc

    if root.tag != _qname(SOAP_NS, "Envelope"):
        raise ParseError(f"Reply to {action} is not a SOAP envelope (root is {root.tag})")
    body = root.find(_qname(SOAP_NS, "Body"))
    if body is None or len(body) == 0:
        raise ParseError(f"Reply to {action} has an empty or missing SOAP body")

    payload = body[0]
    if payload.tag == _qname(SOAP_NS, "Fault"):
        return _decode_fault(payload)

    expected = _qname(schema.namespace, f"{action}Response")
    if payload.tag != expected:
        raise ParseError(f"Expected {expected} in reply, got {payload.tag}")
    result = payload.find(_qname(schema.namespace, schema.result_element))
    if result is None:
        raise ParseError(f"Reply to {action} has no {schema.result_element} element")

    fields: Dict[str, Any] = {}
    for name in schema.fields:
        element = _find_child(result, name)
        if element is None:
            fields[name] = None
        elif name in schema.lists:
            fields[name] = _list_value(element)
        else:
            fields[name] = _element_value(element)

    missing = [name for name in schema.required if fields[name] is None]
    if missing:
        raise ParseError(
            f"Reply to {action} lacks required field(s): {', '.join(missing)}"
        )
    return ActionReply(action=action, fields=fields)
