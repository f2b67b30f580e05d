from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from ..config import DomainPolicy
from .base import DomainAdapter


def build_adapters(policies: Iterable[DomainPolicy]) -> Mapping[str, DomainAdapter]:
    """
    Build the read-only domain_key -> adapter table once at startup.
    The table is passed explicitly to the engine; there is no global registry.
    """
    table = {}
    for policy in policies:
        if policy.domain_key in table:
            raise ValueError(f"Duplicate domain key: {policy.domain_key}")
        table[policy.domain_key] = DomainAdapter(policy)
    return MappingProxyType(table)
