"""cloudconfig CLI: resolve and print an application's configuration.

Usage:
    cloudconfig resolve --config-path ./config                  # default profile set
    cloudconfig resolve --config-path ./config --profiles dev,east
    cloudconfig resolve --config-path ./config --key spring.cloud.config.name
"""

import argparse
import asyncio
import json
import logging
import sys

from .config import CloudConfigOptions, Precedence
from .container import Container
from .errors import ConfigError
from .utils import get_property

logger = logging.getLogger(__name__)


def _parse_profiles(value: str) -> list[str]:
    return [p.strip() for p in value.split(",") if p.strip()]


def _build_options(args: argparse.Namespace) -> CloudConfigOptions:
    env_options = CloudConfigOptions.from_env()
    return CloudConfigOptions(
        config_path=args.config_path or env_options.config_path,
        bootstrap_path=args.bootstrap_path or env_options.bootstrap_path,
        active_profiles=(
            _parse_profiles(args.profiles) if args.profiles is not None
            else env_options.active_profiles
        ),
        level=args.log_level or env_options.level,
        file_extension=args.extension,
        precedence=Precedence(args.precedence),
    )


async def _resolve(options: CloudConfigOptions) -> dict:
    async with Container() as container:
        return await container.config.load(options)


def cmd_resolve(args: argparse.Namespace) -> int:
    """Resolve the configuration and print it as JSON.

    Returns:
        0 on success, 1 on any configuration error or missing key.
    """
    options = _build_options(args)
    try:
        config = asyncio.run(_resolve(options))
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1

    if args.key:
        missing = object()
        value = get_property(config, args.key, missing)
        if value is missing:
            print(f"❌ Key not found: {args.key}", file=sys.stderr)
            return 1
        config = value

    print(json.dumps(config, indent=args.indent, default=str))
    return 0


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cloudconfig",
        description="Layered application configuration loader",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    resolve_parser = subparsers.add_parser(
        "resolve", help="Resolve configuration and print it as JSON"
    )
    resolve_parser.add_argument("--config-path", "-c", type=str, default=None,
                                help="Directory holding application.yml "
                                     "(default: $SPRING_CONFIG_PATH)")
    resolve_parser.add_argument("--bootstrap-path", "-b", type=str, default=None,
                                help="Directory holding bootstrap.yml (default: config path)")
    resolve_parser.add_argument("--profiles", "-p", type=str, default=None,
                                help="Comma-separated active profiles "
                                     "(default: $SPRING_CONFIG_PROFILES)")
    resolve_parser.add_argument("--key", "-k", type=str, default=None,
                                help="Print only this dotted key")
    resolve_parser.add_argument("--extension", type=str, default="yml",
                                help="Configuration file extension (default: yml)")
    resolve_parser.add_argument("--precedence", type=str,
                                default=Precedence.BOOTSTRAP_HIGHEST.value,
                                choices=[p.value for p in Precedence])
    resolve_parser.add_argument("--indent", type=int, default=2)
    resolve_parser.add_argument("--log-level", type=str, default=None,
                                choices=["debug", "info", "warning", "error"])

    args = parser.parse_args()

    if args.command == "resolve":
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stderr,
        )
        sys.exit(cmd_resolve(args))
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
