#!/usr/bin/env python3
"""
Call the function over HTTP (function URL or API Gateway stage URL).

  python scripts/call_endpoint.py --url http://<id>.lambda-url.us-east-1.localhost.localstack.cloud:4566/ --name Alice
  python scripts/call_endpoint.py --url ... --body "HTTP Body"
"""
import argparse
import json
import sys
from typing import Any, Dict, Optional

import requests


def call_endpoint(
    url: str,
    name: Optional[str] = None,
    body: Optional[str] = None,
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 10,
) -> requests.Response:
    """GET with ``?name=`` when there is no body, POST the raw body otherwise."""
    params = {"name": name} if name is not None else None
    if body is None:
        return requests.get(url, params=params, headers=headers, timeout=timeout)
    return requests.post(
        url,
        params=params,
        data=body.encode("utf-8"),
        headers={"Content-Type": "text/plain", **(headers or {})},
        timeout=timeout,
    )


def render(response: requests.Response) -> str:
    try:
        payload: Any = response.json()
    except ValueError:
        return response.text
    return json.dumps(payload, indent=2, ensure_ascii=False)


def main(argv=None):
    p = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    p.add_argument("--url", required=True)
    p.add_argument("--name")
    p.add_argument("--body")
    p.add_argument("--user-agent", help="Override the User-Agent header")
    args = p.parse_args(argv)

    headers = {"User-Agent": args.user_agent} if args.user_agent else None
    try:
        response = call_endpoint(args.url, name=args.name, body=args.body, headers=headers)
    except requests.RequestException as e:
        print(f"Request failed: {e}", file=sys.stderr)
        return 2
    print(response.status_code)
    print(render(response))
    return 0 if response.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
