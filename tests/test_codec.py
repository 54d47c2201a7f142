"""Tests for SOAP envelope encoding and reply decoding."""

import xml.etree.ElementTree as ET

import pytest

from adyen_payments import Amount, ParseError
from adyen_payments.core import codec
from adyen_payments.core.codec import COMMON_NS, PAYMENT_NS, RECURRING_NS, SOAP_NS

from replies import (
    authorise_reply,
    disable_reply,
    fault_reply,
    list_reply,
    modification_reply,
    recurring_detail,
    soap_reply,
)


def _request(document):
    root = ET.fromstring(document)
    assert root.tag == f"{{{SOAP_NS}}}Envelope"
    assert root.find(f"{{{SOAP_NS}}}Header") is not None
    call = root.find(f"{{{SOAP_NS}}}Body")[0]
    return call, call[0]


def test_encode_wraps_fields_in_action_and_request_elements():
    document = codec.encode("authorise", [("merchantAccount", "M"), ("reference", "R-1")])
    call, request = _request(document)

    assert call.tag == f"{{{PAYMENT_NS}}}authorise"
    assert request.tag == f"{{{PAYMENT_NS}}}paymentRequest"
    assert [child.tag for child in request] == [
        f"{{{PAYMENT_NS}}}merchantAccount",
        f"{{{PAYMENT_NS}}}reference",
    ]
    assert document.startswith(b"<?xml")


def test_encode_preserves_field_order():
    names = ["shopperIP", "reference", "merchantAccount", "shopperEmail"]
    document = codec.encode("authorise", [(name, "x") for name in names])
    _, request = _request(document)
    assert [child.tag.split("}")[1] for child in request] == names


def test_encode_serializes_amounts_in_common_namespace():
    document = codec.encode("capture", [("modificationAmount", Amount("EUR", 1050))])
    _, request = _request(document)
    amount = request.find(f"{{{PAYMENT_NS}}}modificationAmount")

    assert [child.tag for child in amount] == [f"{{{COMMON_NS}}}currency", f"{{{COMMON_NS}}}value"]
    assert amount.find(f"{{{COMMON_NS}}}currency").text == "EUR"
    assert amount.find(f"{{{COMMON_NS}}}value").text == "10.50"


def test_encode_zero_decimal_amount():
    document = codec.encode("capture", [("modificationAmount", Amount("JPY", 100))])
    _, request = _request(document)
    assert request.find(f".//{{{COMMON_NS}}}value").text == "100"


def test_encode_booleans_nested_values_and_omissions():
    document = codec.encode(
        "authorise",
        [
            ("card", [("holderName", "S. Hopper"), ("cvc", "737")]),
            ("flag", True),
            ("other", False),
            ("skipped", None),
            ("blank", ""),
        ],
    )
    _, request = _request(document)
    names = [child.tag.split("}")[1] for child in request]

    assert names == ["card", "flag", "other", "blank"]
    card = request.find(f"{{{PAYMENT_NS}}}card")
    assert [child.tag.split("}")[1] for child in card] == ["holderName", "cvc"]
    assert request.find(f"{{{PAYMENT_NS}}}flag").text == "true"
    assert request.find(f"{{{PAYMENT_NS}}}other").text == "false"
    assert not request.find(f"{{{PAYMENT_NS}}}blank").text


def test_encode_recurring_actions_use_recurring_namespace():
    document = codec.encode("disable", [("shopperReference", "user-1")])
    call, request = _request(document)
    assert call.tag == f"{{{RECURRING_NS}}}disable"
    assert request.tag == f"{{{RECURRING_NS}}}request"


def test_unknown_action_is_a_programming_error():
    with pytest.raises(ValueError):
        codec.encode("teleport", [])
    with pytest.raises(ValueError):
        codec.decode("teleport", authorise_reply())


def test_decode_authorise_reply():
    reply = codec.decode("authorise", authorise_reply(extra="<ns1:authCode>1234</ns1:authCode>"))

    assert isinstance(reply, codec.ActionReply)
    assert reply.get("pspReference") == "9876543210987654"
    assert reply.get("resultCode") == "Authorised"
    assert reply.get("authCode") == "1234"


def test_absent_optional_fields_decode_to_none_and_empty_stays_empty():
    reply = codec.decode(
        "authorise", authorise_reply(extra="<ns1:refusalReason></ns1:refusalReason>")
    )

    assert reply.get("fraudResult") is None
    assert "fraudResult" in reply.fields
    assert reply.get("refusalReason") == ""


def test_nil_fields_decode_to_none():
    reply = codec.decode(
        "authorise", authorise_reply(extra='<ns1:authCode xsi:nil="true"/>')
    )
    assert reply.get("authCode") is None


def test_nested_fields_decode_to_mappings():
    extra = (
        "<ns1:fraudResult>"
        "<ns1:accountScore>12</ns1:accountScore>"
        "<ns1:results><ns1:FraudCheckResult>a</ns1:FraudCheckResult>"
        "<ns1:FraudCheckResult>b</ns1:FraudCheckResult></ns1:results>"
        "</ns1:fraudResult>"
    )
    reply = codec.decode("authorise", authorise_reply(extra=extra))
    assert reply.get("fraudResult") == {
        "accountScore": "12",
        "results": {"FraudCheckResult": ["a", "b"]},
    }


def test_decode_fault():
    fault = codec.decode("authorise", fault_reply("100", "Invalid request"))
    assert fault == codec.Fault(code="100", message="Invalid request")


def test_decode_modification_reply():
    reply = codec.decode("cancelOrRefund", modification_reply("cancelOrRefund"))
    assert reply.get("response") == "[cancelOrRefund-received]"


def test_decode_list_fields():
    reply = codec.decode(
        "listRecurringDetails", list_reply(recurring_detail("A") + recurring_detail("B"))
    )
    details = reply.get("details")
    assert [detail["recurringDetailReference"] for detail in details] == ["A", "B"]
    assert details[0]["card"]["number"] == "1111"


def test_decode_empty_list():
    assert codec.decode("listRecurringDetails", list_reply()).get("details") == []


@pytest.mark.parametrize(
    "document",
    [
        b"",
        b"not xml at all",
        b"<soap:Envelope",
        b"<html><body>Service unavailable</body></html>",
        soap_reply(""),
    ],
)
def test_malformed_replies_raise_parse_error(document):
    with pytest.raises(ParseError):
        codec.decode("authorise", document)


def test_reply_for_another_action_is_a_parse_error():
    with pytest.raises(ParseError):
        codec.decode("authorise", disable_reply())


def test_missing_required_field_is_a_parse_error():
    document = soap_reply(
        f'<ns1:authoriseResponse xmlns:ns1="{PAYMENT_NS}">'
        "<ns1:paymentResult><ns1:pspReference>1</ns1:pspReference></ns1:paymentResult>"
        "</ns1:authoriseResponse>"
    )
    with pytest.raises(ParseError, match="resultCode"):
        codec.decode("authorise", document)


def test_fault_without_fault_string_is_a_parse_error():
    with pytest.raises(ParseError):
        codec.decode("authorise", soap_reply("<soap:Fault><faultcode>1</faultcode></soap:Fault>"))
