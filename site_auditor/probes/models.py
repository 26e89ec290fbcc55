"""Result types for the network probes.

Every probe returns exactly one of two variants: a probe-specific success
dataclass, or a :class:`ProbeFailure` carrying an error description.  Both
expose ``ok`` so callers can branch without ``isinstance`` checks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass(frozen=True)
class ProbeFailure:
    """A probe that could not complete (network error, timeout, bad input)."""

    error: str
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "error": self.error}


@dataclass(frozen=True)
class DnsAnswer:
    """Addresses returned by the system resolver, in resolver order."""

    addresses: List[Dict[str, Any]]
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": True, "addresses": list(self.addresses)}


@dataclass(frozen=True)
class TlsHandshake:
    """Negotiated session parameters and peer certificate fields.

    ``cert_verified`` is ``False`` when the chain did not validate; the
    handshake was then repeated without verification and the certificate
    fields were decoded from the raw DER bytes.
    """

    protocol: Optional[str]
    cipher: Optional[Dict[str, Any]]
    subject: Optional[Dict[str, str]] = None
    issuer: Optional[Dict[str, str]] = None
    valid_from: Optional[str] = None
    valid_to: Optional[str] = None
    cert_verified: bool = True
    cert_error: Optional[str] = None
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "protocol": self.protocol,
            "cipher": self.cipher,
            "cert": {
                "subject": self.subject,
                "issuer": self.issuer,
                "valid_from": self.valid_from,
                "valid_to": self.valid_to,
            },
            "cert_verified": self.cert_verified,
            "cert_error": self.cert_error,
        }


@dataclass(frozen=True)
class FetchedPage:
    """A fully buffered GET response with timings in milliseconds."""

    url: str
    status: int
    headers: Dict[str, str]
    body: str
    ttfb_ms: float
    download_ms: float
    ok: bool = field(default=True, init=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": True,
            "url": self.url,
            "status": self.status,
            "headers": dict(self.headers),
            "body": self.body,
            "timings": {"ttfb_ms": self.ttfb_ms, "download_ms": self.download_ms},
        }


DnsResult = Union[DnsAnswer, ProbeFailure]
TlsResult = Union[TlsHandshake, ProbeFailure]
FetchResult = Union[FetchedPage, ProbeFailure]
