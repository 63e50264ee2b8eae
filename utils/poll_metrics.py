#!/usr/bin/env python3
"""
Polling client for a running demoware server.

Sends a number of GET requests to the metrics endpoint and prints how many
requests succeeded, were rejected or failed, and how many metrics of each
type were received. Handy to eyeball the effect of --with-auth-token and
--with-random-error-prob, e.g. against a server started with:

    python src --with-auth-token=deadbeef --with-random-error-prob=0.1
"""

import argparse
import asyncio
import base64
from collections import Counter
from typing import Any, Dict, List, NamedTuple, Optional

import aiohttp
from aiohttp import hdrs

DEFAULT_URL = "http://localhost:8080/metrics"
DEFAULT_REQUESTS = 20
DEFAULT_TIMEOUT = 3


class PollResult(NamedTuple):
    """The outcome of a single poll: either a status code or a client error."""

    status_code: Optional[int]
    metrics: List[Dict[str, Any]]
    error: Optional[Exception]


async def poll_once(
    session: aiohttp.ClientSession,
    url: str,
    headers: Dict[str, str],
    timeout: float,
) -> PollResult:
    """
    Fetches the metrics endpoint once.

    Network errors are captured in the result instead of being raised.
    """
    try:
        async with session.get(
            url, headers=headers, timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            metrics: List[Dict[str, Any]] = []
            if response.status == 200:
                metrics = await response.json(content_type=None)
            return PollResult(status_code=response.status, metrics=metrics, error=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        return PollResult(status_code=None, metrics=[], error=e)


def basic_auth_headers(username: str, password: str = "") -> Dict[str, str]:
    """Builds a Basic Authorization header with UTF-8 encoded credentials."""
    credentials = f"{username}:{password}".encode("utf-8")
    return {hdrs.AUTHORIZATION: "Basic " + base64.b64encode(credentials).decode("ascii")}


def summarize(results: List[PollResult]) -> Dict[str, Counter]:
    """Counts response statuses and received metric types."""
    statuses: Counter = Counter()
    types: Counter = Counter()
    for result in results:
        statuses[str(result.status_code) if result.error is None else "error"] += 1
        types.update(metric["type"] for metric in result.metrics)
    return {"statuses": statuses, "types": types}


async def poll(url: str, requests: int, token: str, timeout: float) -> Dict[str, Counter]:
    """Sends the requests concurrently and summarizes the outcomes."""
    headers = basic_auth_headers(token) if token else {}
    async with aiohttp.ClientSession() as session:
        results = await asyncio.gather(
            *(poll_once(session, url, headers, timeout) for _ in range(requests))
        )
    return summarize(list(results))


def main() -> None:
    parser = argparse.ArgumentParser(description="Poll a demoware metrics endpoint.")
    parser.add_argument("--url", default=DEFAULT_URL)
    parser.add_argument("-n", "--requests", type=int, default=DEFAULT_REQUESTS)
    parser.add_argument("--token", default="", help="Basic auth username to send.")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT)
    args = parser.parse_args()

    summary = asyncio.run(poll(args.url, args.requests, args.token, args.timeout))
    print(f"Polled {args.url} {args.requests} times")
    for status, count in sorted(summary["statuses"].items()):
        print(f"- status {status}: {count}")
    for metric_type, count in sorted(summary["types"].items()):
        print(f"- {metric_type}: {count}")


if __name__ == "__main__":
    main()
