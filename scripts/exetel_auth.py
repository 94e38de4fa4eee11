#!/usr/bin/env python
from __future__ import annotations

import argparse
import getpass
import json
import os
import sys
from pathlib import Path

from exetel import Authorization
from exetel.config import ApiConfig
from exetel.errors import ExetelError
from exetel.utils.env import env_setting


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Log in to Exetel and report the issued token")
    parser.add_argument(
        "-u",
        "--username",
        default=None,
        help="Username (defaults to $EXETEL_USERNAME or .env)",
    )
    parser.add_argument("--save", default="", help="Write the authorization as JSON to this path")
    args = parser.parse_args(argv)

    config = ApiConfig.from_env()
    username = args.username or env_setting("EXETEL_USERNAME")
    if not username:
        parser.error("a username is required (--username or EXETEL_USERNAME)")

    try:
        auth = Authorization.authenticate(username, getpass.getpass("Enter password: "), config=config)
    except ExetelError as exc:
        print(json.dumps({"ok": False, "error": str(exc)}), file=sys.stderr)
        return 1

    if args.save:
        out = Path(args.save)
        out.parent.mkdir(parents=True, exist_ok=True)
        # Created owner-only; a previous file is replaced rather than reused.
        out.unlink(missing_ok=True)
        fd = os.open(out, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(auth.to_dict(), fh, indent=2)

    token = auth.access_token
    print(
        json.dumps(
            {
                "ok": True,
                "accessToken_prefix": token[:16] + "...",
                "len": len(token),
                "expiresAt": auth.expires_at.isoformat(),
            }
        )
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
