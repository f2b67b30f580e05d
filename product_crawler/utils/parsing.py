from __future__ import annotations

from typing import List
from urllib.parse import urljoin, urlparse

from bs4 import BeautifulSoup

from ..config import DomainPolicy

HTTP_SCHEMES = ("http://", "https://")


def normalize_url(url: str) -> str:
    """
    Canonical form used for visited/product bookkeeping: trailing slashes stripped.
    Scheme, case and query string are left untouched.
    """
    return url.rstrip("/")


def is_product_url(url: str, policy: DomainPolicy) -> bool:
    lowered = url.lower()
    return any(pattern.lower() in lowered for pattern in policy.product_url_patterns)


def is_in_allowed_domain(url: str, policy: DomainPolicy) -> bool:
    """
    True when `url` is absolute and its host contains one of the allowed hosts.
    Substring match, so "snitch.co.in" also admits "www.snitch.co.in".
    """
    try:
        parsed = urlparse(url)
        host = parsed.hostname
    except ValueError:
        return False
    if not parsed.scheme or not host:
        return False
    return any(allowed.lower() in host for allowed in policy.allowed_hosts)


def extract_links(html: str, base_url: str) -> List[str]:
    """
    Extract absolute http(s) links from an HTML string, in document order.
    """
    soup = BeautifulSoup(html, "html.parser")
    out: List[str] = []
    for a in soup.select("a[href]"):
        href = a.get("href")
        if not href:
            continue
        absolute = urljoin(base_url, href.strip())
        if absolute.startswith(HTTP_SCHEMES):
            out.append(absolute)
    return out
