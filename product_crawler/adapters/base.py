from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

from ..config import DomainPolicy
from ..utils.parsing import is_in_allowed_domain, is_product_url


@dataclass(frozen=True)
class DomainAdapter:
    """
    Predicate bundle for one domain, parameterized entirely by its policy.
    Every site shares the same logic, so there is one class and no subclasses.
    """
    policy: DomainPolicy

    @property
    def name(self) -> str:
        return self.policy.domain_key

    @property
    def domains(self) -> FrozenSet[str]:
        return self.policy.allowed_hosts

    def is_product_url(self, url: str) -> bool:
        return is_product_url(url, self.policy)

    def matches(self, url: str) -> bool:
        """Return True if `url` belongs to this adapter's allowed hosts."""
        return is_in_allowed_domain(url, self.policy)
