"""DNS probe — resolve a hostname through the system resolver."""

from __future__ import annotations

import asyncio
import logging
import socket

from site_auditor.probes.models import DnsAnswer, DnsResult, ProbeFailure

log = logging.getLogger(__name__)

_FAMILIES = {socket.AF_INET: 4, socket.AF_INET6: 6}


async def dns_lookup(hostname: str) -> DnsResult:
    """Resolve *hostname* to every address the resolver knows about.

    A single attempt with the resolver's own timeout.  Never raises: any
    resolution error becomes a :class:`ProbeFailure`.
    """
    loop = asyncio.get_running_loop()
    try:
        infos = await loop.getaddrinfo(hostname, None, type=socket.SOCK_STREAM)
    except (OSError, ValueError) as exc:
        # UnicodeError (bad IDNA label) is a ValueError subclass.
        log.warning("DNS lookup for %s failed: %s", hostname, exc)
        return ProbeFailure(error=str(exc) or type(exc).__name__)

    seen: set[str] = set()
    addresses = []
    for family, _type, _proto, _canon, sockaddr in infos:
        address = sockaddr[0]
        if address in seen:
            continue
        seen.add(address)
        addresses.append({"address": address, "family": _FAMILIES.get(family, 0)})

    return DnsAnswer(addresses=addresses)
