"""Local Site Auditor — DNS, TLS, HTTP and HTML checks for a single URL."""

__version__ = "1.0.0"
