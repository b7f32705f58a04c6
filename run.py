import argparse
import json
import logging
import sys

import uvicorn

from scopecrawl import config as env
from scopecrawl.api.server import create_app
from scopecrawl.container import Container
from scopecrawl.exceptions import ConfigNotFoundError
from scopecrawl.services.crawler_config_parser import load_crawler_config
from scopecrawl.services.reporter import LoggingReporter

logger = logging.getLogger(__name__)


def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="ScopeCrawl: bounded, domain-scoped web crawler")
    parser.add_argument("--config", help="YAML crawl config; runs one crawl and prints the JSON report")
    parser.add_argument("--host", default=None, help="API bind host (default from SCOPECRAWL_HOST)")
    parser.add_argument("--port", type=int, default=None, help="API bind port (default from SCOPECRAWL_PORT)")
    return parser.parse_args(argv)


def run_config(container: Container, config_path: str, out=None) -> int:
    """Run the crawl described by `config_path` and write its report as JSON."""
    out = out if out is not None else sys.stdout
    try:
        cfg = load_crawler_config(config_path)
    except (ConfigNotFoundError, ValueError) as e:
        logger.error("Cannot load crawl config %s: %s", config_path, e)
        return 2
    executor = container.crawl_executor()
    report = executor.crawl_config(cfg, reporter=LoggingReporter())
    json.dump(report.to_dict(), out, indent=2)
    out.write("\n")
    return 0


def main(container: Container = None, argv=None) -> int:
    logging.basicConfig(
        level=env.get_str_env("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = _parse_args(argv)
    container = container if container is not None else Container()

    if args.config:
        return run_config(container, args.config)

    host = args.host or container.config.SCOPECRAWL_HOST()
    port = args.port or int(container.config.SCOPECRAWL_PORT())
    app = create_app(container)
    logger.info("Starting ScopeCrawl API on %s:%s", host, port)
    uvicorn.run(app, host=host, port=port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
