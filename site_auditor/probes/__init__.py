"""Network probe set — DNS lookup, TLS inspection, timed HTTP fetch."""

from site_auditor.probes.dns import dns_lookup
from site_auditor.probes.fetcher import timed_fetch
from site_auditor.probes.models import (
    DnsAnswer,
    DnsResult,
    FetchedPage,
    FetchResult,
    ProbeFailure,
    TlsHandshake,
    TlsResult,
)
from site_auditor.probes.tls import tls_inspect

__all__ = [
    "dns_lookup",
    "tls_inspect",
    "timed_fetch",
    "DnsAnswer",
    "TlsHandshake",
    "FetchedPage",
    "ProbeFailure",
    "DnsResult",
    "TlsResult",
    "FetchResult",
]
