from __future__ import annotations

from functools import lru_cache
from typing import Optional
from urllib.parse import urlsplit

import tldextract


@lru_cache(maxsize=1)
def _extractor() -> tldextract.TLDExtract:
    # Bundled public-suffix snapshot only; no network fetch at runtime
    return tldextract.TLDExtract(suffix_list_urls=())


def _strip_www(host: str) -> str:
    return host[4:] if host.startswith("www.") else host


def hostname_from_website(url: Optional[str]) -> Optional[str]:
    """Hostname of a website URL with a leading ``www.`` removed.

    Hosts under a suffix the public-suffix list does not know (``acme.internal``)
    fall back to the plain URL host. Returns None when no dotted host is present.
    """
    if not url:
        return None
    text = str(url).strip().lower()
    if not text:
        return None
    host = _extractor()(text).fqdn
    if not host:
        host = urlsplit(text if "://" in text else f"//{text}").hostname or ""
        if "." not in host:
            return None
    return _strip_www(host)


def normalize_domain(domain: Optional[str]) -> Optional[str]:
    """Lower-case a bare domain, dropping any scheme, path or ``www.`` prefix."""
    if not domain:
        return None
    text = str(domain).strip().lower()
    for prefix in ("https://", "http://"):
        if text.startswith(prefix):
            text = text[len(prefix):]
    text = text.split("/", 1)[0].split("?", 1)[0].strip(".")
    text = _strip_www(text)
    return text or None


def email_domain(email: Optional[str]) -> Optional[str]:
    if not email or "@" not in str(email):
        return None
    domain = str(email).rsplit("@", 1)[1].strip().lower()
    return domain or None
