"""
Command line client for a running crisis updates service.

    crisis-updates add "Flood" "Rising waters" "Riverdale"
    crisis-updates search Riverdale
    crisis-updates delete 1
"""

import argparse
import json
import sys
from typing import List, Optional

import httpx

DEFAULT_BASE_URL = "http://127.0.0.1:8000/api/v1/crisis-updates"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crisis-updates", description="Crisis updates client")
    parser.add_argument("--base-url", default=DEFAULT_BASE_URL)
    sub = parser.add_subparsers(dest="command", required=True)

    add = sub.add_parser("add", help="create a crisis update")
    add.add_argument("title")
    add.add_argument("description")
    add.add_argument("location")

    get = sub.add_parser("get", help="show one crisis update")
    get.add_argument("id", type=int)

    sub.add_parser("latest", help="show the most recently created update")
    sub.add_parser("list", help="list every update")

    search = sub.add_parser("search", help="updates at an exact location")
    search.add_argument("location")

    update = sub.add_parser("update", help="replace an update's fields")
    update.add_argument("id", type=int)
    update.add_argument("title")
    update.add_argument("description")
    update.add_argument("location")

    delete = sub.add_parser("delete", help="delete a crisis update")
    delete.add_argument("id", type=int)

    return parser


def _request(client: httpx.Client, args: argparse.Namespace) -> httpx.Response:
    base = args.base_url.rstrip("/")
    if args.command == "add":
        body = {"title": args.title, "description": args.description, "location": args.location}
        return client.post(f"{base}/", json=body)
    if args.command == "get":
        return client.get(f"{base}/{args.id}")
    if args.command == "latest":
        return client.get(f"{base}/latest")
    if args.command == "list":
        return client.get(f"{base}/")
    if args.command == "search":
        return client.get(f"{base}/", params={"location": args.location})
    if args.command == "update":
        body = {"title": args.title, "description": args.description, "location": args.location}
        return client.put(f"{base}/{args.id}", json=body)
    if args.command == "delete":
        return client.delete(f"{base}/{args.id}")
    raise ValueError(f"unknown command {args.command}")


def run(argv: Optional[List[str]] = None, client: Optional[httpx.Client] = None) -> int:
    """
    Execute one command and print the JSON response.
    Returns 0 on success, 1 when the service reports an error.
    """
    args = build_parser().parse_args(argv)
    owns_client = client is None
    client = client or httpx.Client(timeout=30.0)
    try:
        resp = _request(client, args)
    except httpx.HTTPError as e:
        print(f"Connection Error: {e}", file=sys.stderr)
        return 1
    finally:
        if owns_client:
            client.close()

    if resp.is_error:
        try:
            detail = resp.json().get("detail", resp.text)
        except ValueError:
            detail = resp.text
        print(f"Error {resp.status_code}: {detail}", file=sys.stderr)
        return 1
    print(json.dumps(resp.json(), indent=2))
    return 0


def main():
    sys.exit(run())


if __name__ == "__main__":
    main()
