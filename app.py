from __future__ import annotations

import sys
import argparse
import logging
from typing import List, Optional

import yaml

from extender.api import create_app
from extender.config import ExtenderConfig, load_config
from extender.policy import POLICY_FORMATS, scheduler_policy

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
	logging.basicConfig(
		level=getattr(logging, level, logging.INFO),
		format="%(asctime)s %(levelname)s %(name)s: %(message)s",
		stream=sys.stderr,
		force=True,
	)


def build_app(config: Optional[ExtenderConfig] = None):
	"""Build the Flask app from an explicit config, or resolve one from file/env."""
	config = config or load_config()
	configure_logging(config.log_level)
	return create_app(config)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Image-locality scheduler extender")
	parser.add_argument("--config", default=None, help="YAML config file (default: $EXTENDER_CONFIG)")
	parser.add_argument("--http-addr", default=None, help="The ip:port address the extender endpoint binds to")
	parser.add_argument("--api-prefix", default=None, help="The api prefix path, e.g. /scheduler_extension")
	parser.add_argument("--priorities-prefix", default=None, help="The priorities prefix path, e.g. /a_new_priorities")
	parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING or ERROR")
	parser.add_argument("--print-policy", metavar="URL", default=None,
		help="print the scheduler extender config for an extender reachable at URL and exit")
	parser.add_argument("--policy-format", default="policy", choices=POLICY_FORMATS)
	parser.add_argument("--weight", type=int, default=1)
	return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
	args = parse_args(argv)
	config = load_config(
		args.config,
		http_addr=args.http_addr,
		api_prefix=args.api_prefix,
		priorities_prefix=args.priorities_prefix,
		log_level=args.log_level,
	)

	if args.print_policy:
		policy = scheduler_policy(config, args.print_policy, weight=args.weight, fmt=args.policy_format)
		yaml.safe_dump(policy, sys.stdout, sort_keys=False)
		return

	application = build_app(config)
	host, _, port = config.bind.rpartition(":")
	logger.info(f"scheduler extender http server started on the address {config.http_addr}")
	application.run(host=host, port=int(port))


# Build app at module level (for gunicorn)
app = build_app()


if __name__ == "__main__":
	main()
