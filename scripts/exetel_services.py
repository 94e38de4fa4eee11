#!/usr/bin/env python
"""List the services on an Exetel account (/v1/service)."""

from __future__ import annotations

import argparse
import getpass
import json
import logging
import sys

from exetel import Authorization
from exetel.config import ApiConfig
from exetel.errors import ExetelError
from exetel.utils.env import env_setting

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Query the Exetel web API for account services")
    parser.add_argument(
        "-u",
        "--username",
        default=None,
        help="Username to authenticate with (defaults to $EXETEL_USERNAME or .env)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    config = ApiConfig.from_env()
    username = args.username or env_setting("EXETEL_USERNAME")
    if not username:
        parser.print_usage()
        return 0

    try:
        password = getpass.getpass("Enter password: ")
        authorization = Authorization.authenticate(username, password, config=config)
        with authorization.into_client() as client:
            services = client.services()
    except ExetelError as exc:
        logger.debug("Request failed", exc_info=True)
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(services.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
