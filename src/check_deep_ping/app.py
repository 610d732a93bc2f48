from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Tuple
from urllib.parse import quote, urlsplit

from check_deep_ping.core.managers.config_manager import config_manager
from check_deep_ping.core.utils.configure_logging import configure_logger, parse_level
from deepping.model import DEFAULT_INDENT
from probe.controllers.probe_controller import ProbeController
from probe.model import DEFAULT_USER_AGENT, ProbeSettings
from probe.services.nagios_result_service import format_result

logger = logging.getLogger(__name__)

VERSION = "2016-09-20"
PROG = "check_deep_ping"

_TRUTHY = {"1", "t", "true", "yes", "y", "on"}
# Sub-delimiters and existing escapes stay as they are, so an already escaped path is unchanged
_PATH_SAFE = "/%:@!$&'()*+,;="


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


def build_parser() -> argparse.ArgumentParser:
    """Command line options. Defaults come from settings.json."""
    cfg = config_manager.get_nested
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="XML Rest API parser for Deep Pings",
    )
    parser.add_argument("-U", "--url", default="",
                        help="Full URL to check, in the format: protocol://(hostname|IP)(?:port)/path")
    parser.add_argument("-H", "--hostname", default=cfg("check.hostname", "localhost"),
                        help="Hostname or IP to check")
    parser.add_argument("-p", "--port", type=int, default=cfg("check.port", 80), help="TCP port")
    parser.add_argument("-P", "--protocol", default=cfg("check.protocol", "http"),
                        help="Protocol to use (http or https)")
    parser.add_argument("-u", "--urlpath", default="", help="The path part of the url")
    parser.add_argument("-w", "--warning", type=float, default=cfg("check.warning", 10.0),
                        help="Response time to result in WARNING status, in seconds")
    parser.add_argument("-c", "--critical", type=float, default=cfg("check.critical", 15.0),
                        help="Response time to result in CRITICAL status, in seconds")
    parser.add_argument("-t", "--timeout", type=float, default=cfg("check.timeout", 30.0),
                        help="Number of seconds before connection times out")
    parser.add_argument("-l", "--log-level", default=None,
                        help="Log level (options: debug, info, warn, error, fatal, panic)")
    parser.add_argument("-V", "--verbose", action="store_true", default=_env_flag("OPUS_DP_VERBOSE"),
                        help="Verbose output. Includes a full dump of the returned data [$OPUS_DP_VERBOSE]")
    parser.add_argument("-d", "--debug", action="store_true", default=_env_flag("OPUS_DP_DEBUG"),
                        help="Run in debug mode [$OPUS_DP_DEBUG]")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def resolve_target(args: argparse.Namespace) -> Tuple[str, str]:
    """
    Returns (url, path). A full --url wins and its path is reported;
    otherwise the url is assembled from protocol, hostname, port and urlpath.
    """
    if args.url:
        return args.url, quote(urlsplit(args.url).path, safe=_PATH_SAFE)
    url = f"{args.protocol}://{args.hostname}:{args.port}{args.urlpath}"
    return url, args.urlpath


def _setup_logging(args: argparse.Namespace) -> None:
    if args.log_level is not None:
        level = parse_level(args.log_level)
    elif args.debug:
        level = logging.DEBUG
    else:
        level = parse_level(config_manager.get_nested("debug.level"))
    configure_logger(level, silenced_loggers={"aiohttp": "CRITICAL", "asyncio": "WARNING"})


def main(argv: list[str] | None = None) -> int:
    """Entrypoint: runs one check, prints the status line and returns the exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        _setup_logging(args)
    except ValueError as e:
        parser.error(str(e))

    url, path = resolve_target(args)
    settings = ProbeSettings(
        url=url,
        path=path,
        warning=args.warning,
        critical=args.critical,
        timeout=args.timeout,
        user_agent=config_manager.get_nested("http.user_agent", DEFAULT_USER_AGENT),
        verbose=args.verbose,
        indent=config_manager.get_nested("render.indent", DEFAULT_INDENT),
    )
    logger.debug("Probe settings: %s", settings.model_dump())

    result = asyncio.run(ProbeController(settings).run())
    print(format_result(result, verbose=settings.verbose))
    return result.exit_code


if __name__ == "__main__":
    sys.exit(main())
