"""TLS probe — handshake on port 443 and report session and certificate data.

The probe is an inspection, not a trust decision.  It first tries a
verifying handshake; if only certificate verification fails, it retries
with verification disabled so reachability and certificate validity are
reported separately.  The unverified peer certificate is decoded from its
DER form with ``cryptography``, since ``getpeercert()`` only parses
certificates that passed verification.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import ssl
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from cryptography import x509
from cryptography.x509.oid import NameOID

from site_auditor.config import settings
from site_auditor.probes.models import ProbeFailure, TlsHandshake, TlsResult

log = logging.getLogger(__name__)

# OpenSSL long names, as used by ``getpeercert()``.
_ATTRIBUTE_NAMES = {
    NameOID.COMMON_NAME: "commonName",
    NameOID.COUNTRY_NAME: "countryName",
    NameOID.LOCALITY_NAME: "localityName",
    NameOID.STATE_OR_PROVINCE_NAME: "stateOrProvinceName",
    NameOID.ORGANIZATION_NAME: "organizationName",
    NameOID.ORGANIZATIONAL_UNIT_NAME: "organizationalUnitName",
    NameOID.EMAIL_ADDRESS: "emailAddress",
    NameOID.SERIAL_NUMBER: "serialNumber",
    NameOID.DOMAIN_COMPONENT: "domainComponent",
}

_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _flatten_name(rdns: Any) -> Optional[Dict[str, str]]:
    """Turn ``getpeercert()``'s nested RDN tuples into a flat dict."""
    if not rdns:
        return None
    return {key: value for rdn in rdns for key, value in rdn}


def _name_dict(name: x509.Name) -> Optional[Dict[str, str]]:
    if not len(name):
        return None
    return {
        _ATTRIBUTE_NAMES.get(attr.oid, attr.oid.dotted_string): str(attr.value)
        for attr in name
    }


def _cert_time(moment: datetime) -> str:
    """Format like ``getpeercert()``: ``'Jan  1 00:00:00 2026 GMT'``."""
    return (
        f"{_MONTHS[moment.month - 1]} {moment.day:2d} "
        f"{moment:%H:%M:%S} {moment.year} GMT"
    )


def _decode_der(der: Optional[bytes]) -> Dict[str, Any]:
    """Parse a DER certificate into :class:`TlsHandshake` certificate fields."""
    if not der:
        return {}
    try:
        cert = x509.load_der_x509_certificate(der)
    except ValueError as exc:
        log.warning("Could not decode peer certificate: %s", exc)
        return {}
    return {
        "subject": _name_dict(cert.subject),
        "issuer": _name_dict(cert.issuer),
        "valid_from": _cert_time(cert.not_valid_before_utc),
        "valid_to": _cert_time(cert.not_valid_after_utc),
    }


def _unverified_context() -> ssl.SSLContext:
    ctx = ssl.create_default_context()
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE
    return ctx


async def _handshake(
    hostname: str, port: int, ctx: ssl.SSLContext
) -> Tuple[Optional[str], Optional[Dict[str, Any]], Dict[str, Any], Optional[bytes]]:
    """Connect, read the negotiated parameters, and always close the socket."""
    _reader, writer = await asyncio.open_connection(
        hostname, port, ssl=ctx, server_hostname=hostname
    )
    try:
        ssl_obj = writer.get_extra_info("ssl_object")
        protocol = ssl_obj.version() if ssl_obj else None
        cipher = None
        raw_cipher = ssl_obj.cipher() if ssl_obj else None
        if raw_cipher:
            name, version, bits = raw_cipher
            cipher = {"name": name, "version": version, "bits": bits}
        cert = (ssl_obj.getpeercert() if ssl_obj else None) or {}
        der = ssl_obj.getpeercert(binary_form=True) if ssl_obj else None
        return protocol, cipher, cert, der
    finally:
        writer.close()
        # Peers often drop the connection without a close_notify.
        with contextlib.suppress(OSError):
            await writer.wait_closed()


async def _inspect(hostname: str, port: int) -> TlsHandshake:
    try:
        protocol, cipher, cert, _ = await _handshake(
            hostname, port, ssl.create_default_context()
        )
    except ssl.SSLCertVerificationError as exc:
        reason = getattr(exc, "verify_message", None) or str(exc)
        log.info("Certificate for %s did not verify (%s); re-inspecting", hostname, reason)
        protocol, cipher, _, der = await _handshake(hostname, port, _unverified_context())
        return TlsHandshake(
            protocol=protocol,
            cipher=cipher,
            cert_verified=False,
            cert_error=reason,
            **_decode_der(der),
        )

    return TlsHandshake(
        protocol=protocol,
        cipher=cipher,
        subject=_flatten_name(cert.get("subject")),
        issuer=_flatten_name(cert.get("issuer")),
        valid_from=cert.get("notBefore"),
        valid_to=cert.get("notAfter"),
    )


async def tls_inspect(
    hostname: str, timeout: Optional[float] = None, port: int = 443
) -> TlsResult:
    """Inspect the TLS endpoint of *hostname*.

    Exactly one outcome terminates the probe: a :class:`TlsHandshake`, a
    connection error, or ``"TLS timeout"`` once *timeout* seconds (default
    ``settings.tls_timeout``) elapse.  Never raises.
    """
    timeout = settings.tls_timeout if timeout is None else timeout
    try:
        return await asyncio.wait_for(_inspect(hostname, port), timeout)
    except asyncio.TimeoutError:
        log.warning("TLS inspection of %s timed out after %.1fs", hostname, timeout)
        return ProbeFailure(error="TLS timeout")
    except (OSError, ValueError) as exc:
        # ssl.SSLError is an OSError subclass; UnicodeError and the
        # "embedded null character" error are ValueErrors.
        log.warning("TLS inspection of %s failed: %s", hostname, exc)
        return ProbeFailure(error=str(exc) or type(exc).__name__)
