"""Operator command-line tool for the ID Broker.

This module serves as a CLI wrapper around idbroker.core.broker.
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from idbroker.core.broker import IdBrokerClient, BrokerTrustVerifier, IPRangeSet
from idbroker.core.broker.exceptions import BrokerError
from idbroker.core.validators import parse_csv


def _build_client(args: argparse.Namespace) -> IdBrokerClient:
    config = {
        "trusted_ip_ranges": parse_csv(args.trusted_ranges),
        "assert_valid_broker_ip": not args.no_ip_check,
        "http_client_options": {"timeout": args.timeout},
    }
    return IdBrokerClient(args.base_uri, args.token, config)


def _emit(payload) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))


def main(argv=None) -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="ID Broker helper")
    parser.add_argument("--base-uri", default=os.environ.get("IDBROKER_BASE_URI"))
    parser.add_argument("--token", default=os.environ.get("IDBROKER_ACCESS_TOKEN"))
    parser.add_argument("--trusted-ranges", default=os.environ.get("IDBROKER_TRUSTED_IP_RANGES", ""),
                        help="Comma-separated CIDR ranges the broker must resolve into")
    parser.add_argument("--no-ip-check", action="store_true",
                        help="Skip broker IP verification")
    parser.add_argument("--timeout", type=float, default=float(os.environ.get("IDBROKER_TIMEOUT", "30")))
    parser.add_argument("-v", "--verbose", action="store_true")

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("check-trust")
    sub.add_parser("site-status")

    sg = sub.add_parser("get-user")
    sg.add_argument("--employee-id", required=True)

    sl = sub.add_parser("list-users")
    sl.add_argument("--fields", nargs="*")
    sl.add_argument("--username")
    sl.add_argument("--email")

    sd = sub.add_parser("deactivate-user")
    sd.add_argument("--employee-id", required=True)

    args = parser.parse_args(argv)

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(name)s] %(levelname)s %(message)s",
    )

    if not args.base_uri:
        parser.error("Missing broker base URI (--base-uri or IDBROKER_BASE_URI)")

    if args.cmd == "check-trust":
        if not parse_csv(args.trusted_ranges):
            parser.error("check-trust requires --trusted-ranges")
        try:
            address = BrokerTrustVerifier().verify(args.base_uri, IPRangeSet(parse_csv(args.trusted_ranges)))
        except BrokerError as e:
            print(f"[check-trust] Error: {e}", file=sys.stderr)
            sys.exit(1)
        print(f"[check-trust] Broker resolves to trusted address {address}", file=sys.stderr)
        _emit({"trusted": True, "address": address})
        return

    if not args.token:
        parser.error("Missing access token (--token or IDBROKER_ACCESS_TOKEN)")

    try:
        client = _build_client(args)
        with client:
            if args.cmd == "site-status":
                _emit({"status": client.get_site_status()})
            elif args.cmd == "get-user":
                user = client.get_user(args.employee_id)
                if user is None:
                    print(f"[get-user] No user with employee_id {args.employee_id}", file=sys.stderr)
                    sys.exit(1)
                _emit(user)
            elif args.cmd == "list-users":
                search = {key: value for key, value in (("username", args.username), ("email", args.email)) if value}
                _emit(client.list_users(args.fields, search))
            elif args.cmd == "deactivate-user":
                client.deactivate_user(args.employee_id)
                print(f"[deactivate-user] Deactivated {args.employee_id}", file=sys.stderr)
    except BrokerError as e:
        print(f"[{args.cmd}] Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
