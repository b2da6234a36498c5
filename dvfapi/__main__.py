from __future__ import annotations

import argparse
import hashlib
import json
import sys
from typing import Dict, List

from dvfapi.client import Client, socket_endpoint_hub
from dvfapi.config import ClientConfig, load_config
from dvfapi.errors import DvfError
from dvfapi.log import setup_logging


def _parse_params(items: List[str]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for item in items or []:
        if "=" not in item:
            raise SystemExit(f"Bad query parameter {item!r}, expected key=value")
        k, v = item.split("=", 1)
        out[k] = v
    return out


def _client(args: argparse.Namespace) -> Client:
    cfg = load_config(args.config) if args.config else ClientConfig.from_env()
    return Client.from_config(cfg)


def get_cmd(args: argparse.Namespace) -> int:
    with _client(args) as c:
        data = c.get(args.path, params=_parse_params(args.param))
    print(json.dumps(data, indent=2, ensure_ascii=False))
    return 0


def sign_cmd(args: argparse.Namespace) -> int:
    hashfunc = {"none": None, "sha256": hashlib.sha256}[args.hash]
    with _client(args) as c:
        sig, pub = c.sign_and_public_key(
            args.message, hashfunc=hashfunc, fixed_width=args.fixed_width
        )
    print(sig)
    print(f"Public key : {pub}")
    return 0


def ws_cmd(args: argparse.Namespace) -> int:
    endpoint = socket_endpoint_hub(args.private)
    if not endpoint:
        print("no endpoint for private streams", file=sys.stderr)
        return 1
    print(endpoint)
    return 0


def main() -> int:
    p = argparse.ArgumentParser(description="dvfapi CLI")
    p.add_argument("--config", "-c", help="Path to YAML config (default: DVF_* env / .env)")
    p.add_argument("--log-level", default="WARNING", help="DEBUG dumps raw HTTP traffic")
    sub = p.add_subparsers(dest="cmd")

    p_get = sub.add_parser("get", help="GET a path and print the JSON response")
    p_get.add_argument("path", help="Path relative to the base URL, e.g. /v1/trading/r/getConf")
    p_get.add_argument("--param", "-p", action="append", default=[], help="key=value query parameter")
    p_get.set_defaults(func=get_cmd)

    p_sign = sub.add_parser("sign", help="Sign a message with the configured private key")
    p_sign.add_argument("message")
    p_sign.add_argument("--hash", choices=["none", "sha256"], default="none")
    p_sign.add_argument("--fixed-width", action="store_true", help="Pad components to 32 bytes")
    p_sign.set_defaults(func=sign_cmd)

    p_ws = sub.add_parser("ws-endpoint", help="Print the websocket endpoint")
    p_ws.add_argument("--private", action="store_true")
    p_ws.set_defaults(func=ws_cmd)

    args = p.parse_args()
    setup_logging(args.log_level)
    if not hasattr(args, "func"):
        p.print_help()
        return 2
    try:
        return int(args.func(args))
    except DvfError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
