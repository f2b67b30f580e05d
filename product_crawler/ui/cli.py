from __future__ import annotations

import argparse
import asyncio
import logging
from typing import List

from ..config import CrawlConfig
from ..utils.logging import setup_logging
from ..utils.loader import load_symbol
from ..adapters.registry import build_adapters
from ..engines.base import CrawlReport
from ..engines.orchestrator import ProductCrawlEngine
from ..export.base import render_json

logger = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Discover product URLs on configured e-commerce sites")
    p.add_argument("--config", type=str, help="Path to config JSON", default=None)
    p.add_argument("--domains", type=str, default=None,
                   help="Comma-separated domain keys to crawl (default: all enabled domains)")
    p.add_argument("--engine", type=str, default=None,
                   help="Link source dotted path (module:ClassName), e.g. the static HTTP source")
    p.add_argument("--exporter", type=str, default=None, help="Exporter dotted path (module:ClassName)")
    p.add_argument("--output", type=str, default=None, help="Output file path")
    p.add_argument("--batch-size", type=int, default=None, help="Pages rendered concurrently per domain")
    p.add_argument("--max-scroll-ms", type=int, default=None,
                   help="Upper bound on infinite-scroll time per page; 0 disables it")
    p.add_argument("--headful", action="store_true", help="Show the browser window")
    p.add_argument("--log-level", type=str, default=None, help="Log level (DEBUG, INFO, WARNING, ERROR)")
    return p


def _load_config(args: argparse.Namespace) -> CrawlConfig:
    if args.config:
        cfg = CrawlConfig.from_file(args.config)
    else:
        cfg = CrawlConfig.from_env()

    if args.domains:
        cfg.select_domains(d.strip() for d in args.domains.split(",") if d.strip())
    if args.engine:
        cfg.engine = args.engine
    if args.exporter:
        cfg.exporter = args.exporter
    if args.output:
        cfg.output_path = args.output
    if args.batch_size is not None:
        cfg.batch_size = args.batch_size
    if args.max_scroll_ms is not None:
        cfg.max_scroll_ms = args.max_scroll_ms or None
    if args.headful:
        cfg.headless = False

    cfg.validate()
    return cfg


def run_cli(argv: List[str] | None = None) -> int:
    args = build_arg_parser().parse_args(argv)
    setup_logging(args.log_level)

    try:
        cfg = _load_config(args)
        exporter_cls = load_symbol(cfg.exporter)
        adapters = build_adapters(cfg.enabled_policies())
        logger.info("Enabled domains: %s", ", ".join(adapters))

        async def _run() -> CrawlReport:
            engine = ProductCrawlEngine(cfg, adapters=adapters)
            return await engine.crawl()

        report: CrawlReport = asyncio.run(_run())
    except Exception:
        # Nothing is written on a fatal failure; partial crawls still export below.
        logger.exception("Crawling failed")
        return 1

    print(render_json(report.discovered))
    exporter = exporter_cls()
    exporter.export(report.discovered, cfg.output_path)

    if report.failed_domains:
        logger.warning("Domains that failed: %s", ", ".join(report.failed_domains))
    logger.info("Visited: %s | Products: %s | Output: %s",
                report.visited_count,
                report.product_count,
                cfg.output_path)
    return 0
