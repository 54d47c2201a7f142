"""Canned gateway replies and request inspection helpers shared by the tests."""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from adyen_payments.core.codec import PAYMENT_NS, RECURRING_NS, SOAP_NS
from adyen_payments.core.config import Credentials

XSI_NS = "http://www.w3.org/2001/XMLSchema-instance"


def soap_reply(body: str) -> bytes:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        f'<soap:Envelope xmlns:soap="{SOAP_NS}" xmlns:xsi="{XSI_NS}">'
        f"<soap:Body>{body}</soap:Body>"
        "</soap:Envelope>"
    ).encode("utf-8")


def authorise_reply(
    result_code: str = "Authorised",
    psp_reference: str = "9876543210987654",
    extra: str = "",
) -> bytes:
    return soap_reply(
        f'<ns1:authoriseResponse xmlns:ns1="{PAYMENT_NS}">'
        "<ns1:paymentResult>"
        f"<ns1:pspReference>{psp_reference}</ns1:pspReference>"
        f"<ns1:resultCode>{result_code}</ns1:resultCode>"
        f"{extra}"
        "</ns1:paymentResult>"
        "</ns1:authoriseResponse>"
    )


def modification_reply(
    action: str,
    response: Optional[str] = None,
    psp_reference: str = "8313842560770001",
) -> bytes:
    if response is None:
        response = f"[{action}-received]"
    return soap_reply(
        f'<ns1:{action}Response xmlns:ns1="{PAYMENT_NS}">'
        f"<ns1:{action}Result>"
        f"<ns1:pspReference>{psp_reference}</ns1:pspReference>"
        f"<ns1:response>{response}</ns1:response>"
        f"</ns1:{action}Result>"
        f"</ns1:{action}Response>"
    )


def list_reply(details: str = "", shopper_reference: str = "user-1") -> bytes:
    return soap_reply(
        f'<ns1:listRecurringDetailsResponse xmlns:ns1="{RECURRING_NS}">'
        "<ns1:result>"
        "<ns1:creationDate>2009-10-27T11:26:22.203+01:00</ns1:creationDate>"
        f"<ns1:details>{details}</ns1:details>"
        "<ns1:lastKnownShopperEmail>s.hopper@example.com</ns1:lastKnownShopperEmail>"
        f"<ns1:shopperReference>{shopper_reference}</ns1:shopperReference>"
        "</ns1:result>"
        "</ns1:listRecurringDetailsResponse>"
    )


def recurring_detail(reference: str, number: str = "1111", variant: str = "mc") -> str:
    return (
        "<ns1:RecurringDetail>"
        "<ns1:card>"
        "<ns1:expiryMonth>12</ns1:expiryMonth>"
        "<ns1:expiryYear>2030</ns1:expiryYear>"
        "<ns1:holderName>S. Hopper</ns1:holderName>"
        f"<ns1:number>{number}</ns1:number>"
        "</ns1:card>"
        "<ns1:creationDate>2009-10-27T11:50:12.178+01:00</ns1:creationDate>"
        f"<ns1:recurringDetailReference>{reference}</ns1:recurringDetailReference>"
        f"<ns1:variant>{variant}</ns1:variant>"
        "</ns1:RecurringDetail>"
    )


def disable_reply(response: str = "[detail-successfully-disabled]") -> bytes:
    return soap_reply(
        f'<ns1:disableResponse xmlns:ns1="{RECURRING_NS}">'
        "<ns1:result>"
        f"<ns1:response>{response}</ns1:response>"
        "</ns1:result>"
        "</ns1:disableResponse>"
    )


def fault_reply(code: str = "100", message: str = "Invalid request") -> bytes:
    return soap_reply(
        "<soap:Fault>"
        f"<faultcode>{code}</faultcode>"
        f"<faultstring>{message}</faultstring>"
        "</soap:Fault>"
    )


@dataclass
class SentRequest:
    document: bytes
    credentials: Credentials
    endpoint: str
    action: Optional[str]
    timeout: Optional[float]

    @property
    def request(self) -> ET.Element:
        """The action's request element, e.g. ``paymentRequest``."""
        body = ET.fromstring(self.document).find(f"{{{SOAP_NS}}}Body")
        return body[0][0]

    @property
    def field_names(self) -> List[str]:
        return [child.tag.rsplit("}", 1)[-1] for child in self.request]

    def find(self, path: str) -> Optional[ET.Element]:
        element = self.request
        for name in path.split("/"):
            element = next(
                (child for child in element if child.tag.rsplit("}", 1)[-1] == name), None
            )
            if element is None:
                return None
        return element

    def text(self, path: str) -> Optional[str]:
        element = self.find(path)
        return None if element is None else (element.text or "")


Reply = Union[bytes, Exception, Callable[[bytes], bytes]]


class FakeTransport:
    """
    Records every request and answers with a fixed reply.

    ``reply`` may be raw bytes, an exception to raise, or a callable that
    builds the reply from the request document.
    """

    def __init__(self, reply: Reply) -> None:
        self.reply = reply
        self.calls: List[SentRequest] = []

    def send(self, document, credentials, endpoint, *, action=None, timeout=None):
        self.calls.append(SentRequest(document, credentials, endpoint, action, timeout))
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(document)
        return self.reply

    @property
    def last(self) -> SentRequest:
        return self.calls[-1]
