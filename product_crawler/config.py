from __future__ import annotations

from dataclasses import dataclass, field, asdict, replace
from typing import Any, Dict, FrozenSet, Iterable, List, Optional
from urllib.parse import urlparse
import os
import json

from .version import __version__, CONFIG_SCHEMA_VERSION


@dataclass(frozen=True)
class DomainPolicy:
    """
    Static, read-only crawl settings for one domain.
    Built once from configuration; the engine never mutates it.
    """
    domain_key: str
    base_url: str
    product_url_patterns: FrozenSet[str]
    allowed_hosts: FrozenSet[str]
    # Caps total visited URLs at max_depth_units * visited_per_depth_unit.
    # This is a volume heuristic, not a hop count from the seed.
    max_depth_units: int = 3
    crawl_delay_ms: int = 1000
    retry_attempts: int = 3
    enabled: bool = True

    @classmethod
    def from_dict(cls, domain_key: str, data: Dict[str, Any]) -> "DomainPolicy":
        return cls(
            domain_key=domain_key,
            base_url=data["base_url"],
            product_url_patterns=frozenset(data.get("product_url_patterns") or []),
            allowed_hosts=frozenset(data.get("allowed_hosts") or [domain_key]),
            max_depth_units=int(data.get("max_depth_units", 3)),
            crawl_delay_ms=int(data.get("crawl_delay_ms", 1000)),
            retry_attempts=int(data.get("retry_attempts", 3)),
            enabled=bool(data.get("enabled", True)),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data.pop("domain_key")
        data["product_url_patterns"] = sorted(self.product_url_patterns)
        data["allowed_hosts"] = sorted(self.allowed_hosts)
        return data

    def validate(self) -> None:
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"{self.domain_key}: base_url must be an absolute http(s) URL")
        if not self.product_url_patterns:
            raise ValueError(f"{self.domain_key}: product_url_patterns cannot be empty")
        if not self.allowed_hosts:
            raise ValueError(f"{self.domain_key}: allowed_hosts cannot be empty")
        if self.max_depth_units <= 0:
            raise ValueError(f"{self.domain_key}: max_depth_units must be > 0")
        if self.crawl_delay_ms < 0:
            raise ValueError(f"{self.domain_key}: crawl_delay_ms must be >= 0")
        if self.retry_attempts < 0:
            raise ValueError(f"{self.domain_key}: retry_attempts must be >= 0")


def default_domains() -> Dict[str, DomainPolicy]:
    return {
        "snitch.co.in": DomainPolicy(
            domain_key="snitch.co.in",
            base_url="https://www.snitch.co.in",
            product_url_patterns=frozenset({"/products/"}),
            allowed_hosts=frozenset({"snitch.co.in"}),
            max_depth_units=3,
            crawl_delay_ms=1000,
            retry_attempts=3,
        ),
        "newme.asia": DomainPolicy(
            domain_key="newme.asia",
            base_url="https://newme.asia",
            product_url_patterns=frozenset({"/product/"}),
            allowed_hosts=frozenset({"newme.asia"}),
            max_depth_units=4,
            crawl_delay_ms=2000,
            retry_attempts=3,
        ),
    }


@dataclass
class CrawlConfig:
    """
    Canonical configuration object passed throughout the system.
    Per-domain settings live in `domains`; everything else is engine-wide.
    """
    schema_version: int = CONFIG_SCHEMA_VERSION
    domains: Dict[str, DomainPolicy] = field(default_factory=default_domains)
    # Pages rendered concurrently per domain.
    batch_size: int = 5
    navigation_timeout_ms: int = 30_000
    wait_until: str = "domcontentloaded"
    # Infinite-scroll settling.
    scroll_step_px: int = 100
    scroll_interval_ms: int = 500
    scroll_settle_ms: int = 500
    max_scroll_ms: Optional[int] = 60_000
    # Termination caps.
    visited_per_depth_unit: int = 100
    max_products: int = 1000
    # Browser launch options.
    headless: bool = True
    browser_args: List[str] = field(default_factory=lambda: [
        "--disable-notifications",
        "--disable-geolocation",
        "--disable-permissions-api",
    ])
    # Static (non-rendering) source settings.
    request_timeout: float = 15.0
    user_agent: str = f"product_crawler/{__version__}"
    # Dotted paths for link source/exporter to allow runtime swapping without code changes.
    engine: str = "product_crawler.engines.browser_engine:PlaywrightLinkSource"
    exporter: str = "product_crawler.export.json_exporter:JSONExporter"
    output_path: str = "product-urls.json"

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["domains"] = {key: policy.to_dict() for key, policy in self.domains.items()}
        return data

    def enabled_policies(self) -> List[DomainPolicy]:
        return [policy for policy in self.domains.values() if policy.enabled]

    def select_domains(self, keys: Iterable[str]) -> None:
        """Enable only the given domain keys; unknown keys are an error."""
        wanted = set(keys)
        unknown = wanted - set(self.domains)
        if unknown:
            raise ValueError(f"Unknown domains: {', '.join(sorted(unknown))}")
        self.domains = {
            key: replace(policy, enabled=key in wanted) for key, policy in self.domains.items()
        }

    # ---------- Loaders ----------

    @classmethod
    def from_env(cls) -> "CrawlConfig":
        """
        Build config from environment variables (all optional).
        """
        def _get(name: str, default: str) -> str:
            return os.getenv(name, default)

        max_scroll = int(_get("CRAWLER_MAX_SCROLL_MS", "60000"))
        cfg = cls(
            batch_size=int(_get("CRAWLER_BATCH_SIZE", "5")),
            navigation_timeout_ms=int(_get("CRAWLER_NAVIGATION_TIMEOUT_MS", "30000")),
            max_scroll_ms=max_scroll or None,
            headless=_get("CRAWLER_HEADLESS", "1").lower() not in ("0", "false", "no"),
            request_timeout=float(_get("CRAWLER_REQUEST_TIMEOUT", "15.0")),
            user_agent=_get("CRAWLER_USER_AGENT", f"product_crawler/{__version__}"),
            engine=_get("CRAWLER_ENGINE", "product_crawler.engines.browser_engine:PlaywrightLinkSource"),
            exporter=_get("CRAWLER_EXPORTER", "product_crawler.export.json_exporter:JSONExporter"),
            output_path=_get("CRAWLER_OUTPUT_PATH", "product-urls.json"),
        )
        selected = [d.strip() for d in _get("CRAWLER_DOMAINS", "").split(",") if d.strip()]
        if selected:
            cfg.select_domains(selected)
        return cfg

    @classmethod
    def from_file(cls, path: str | os.PathLike[str]) -> "CrawlConfig":
        """
        Load configuration from a JSON file. Supports schema migration for future versions.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(migrate_config(data))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CrawlConfig":
        data = dict(data)
        raw_domains = data.pop("domains", None)
        cfg = cls(**data)
        if raw_domains is not None:
            cfg.domains = {
                key: DomainPolicy.from_dict(key, value) for key, value in raw_domains.items()
            }
        return cfg

    # ---------- Validation ----------

    def validate(self) -> None:
        if not self.enabled_policies():
            raise ValueError("No enabled domains; enable at least one domain.")
        for policy in self.enabled_policies():
            policy.validate()
        if self.batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        if self.navigation_timeout_ms <= 0:
            raise ValueError("navigation_timeout_ms must be > 0")
        if self.scroll_step_px <= 0:
            raise ValueError("scroll_step_px must be > 0")
        if self.max_scroll_ms is not None and self.max_scroll_ms < 0:
            raise ValueError("max_scroll_ms must be >= 0 (0 or null disables it)")
        if self.visited_per_depth_unit <= 0 or self.max_products <= 0:
            raise ValueError("visited_per_depth_unit and max_products must be > 0")


# camelCase keys accepted from JS-style domain configs.
_LEGACY_DOMAIN_KEYS = {
    "baseUrl": "base_url",
    "productUrlPatterns": "product_url_patterns",
    "allowedDomains": "allowed_hosts",
    "allowed_domains": "allowed_hosts",
    "maxDepth": "max_depth_units",
    "max_depth": "max_depth_units",
    "crawlDelay": "crawl_delay_ms",
    "retryAttempts": "retry_attempts",
}


def migrate_config(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Migrate config dict to the latest schema version.
    Keep this pure and additive. Add migrations here as you bump schema.
    """
    migrated = dict(raw)
    domains = migrated.get("domains")
    if isinstance(domains, dict):
        migrated["domains"] = {
            key: {_LEGACY_DOMAIN_KEYS.get(k, k): v for k, v in settings.items()}
            for key, settings in domains.items()
        }
    migrated.setdefault("schema_version", CONFIG_SCHEMA_VERSION)
    return migrated
