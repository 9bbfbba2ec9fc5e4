#!/usr/bin/env python3
"""
Fetch Cookies - log into WebReg once and print the session cookies.

Reads the account from .env (WEBREG_USERNAME, WEBREG_PASSWORD, LOGIN_TYPE,
SMS_PASSCODES, WEBREG_TERM, AUTOMATIC_PUSH). With LOGIN_TYPE=push, approve
the Duo push on your phone when the log says so.

Usage:
    python scripts/fetch_cookies.py
"""

import asyncio
import sys
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from webregautoin.models import Success
from webregautoin.service import CookieService, context_from_config
from webregautoin.log import setup_logging

log = setup_logging("fetch_cookies", log_file="fetch_cookies.log")


async def main() -> int:
    ctx = context_from_config()
    service = CookieService()

    try:
        await service.start()
        result = await service.fetch(ctx)
    finally:
        await service.close()

    if isinstance(result, Success):
        print(result.cookies)
        log.info(f"Session started at {ctx.session.start}")
        return 0

    print(f"\n  Login failed: {result.model_dump_json()}\n", file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
