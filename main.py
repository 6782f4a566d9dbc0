#!/usr/bin/env python3
"""
ProductDesk -- command-line client for the ProductDesk API.

Usage:
  python main.py signup --name "Al" --email al@example.com --password 'Abcdef1!'
  python main.py login --email al@example.com --password 'Abcdef1!'
  python main.py whoami
  python main.py list
  python main.py add --name Pen --description "Blue pen" --price 1.5 --category Other
  python main.py show 3
  python main.py edit 3 --price 2.25
  python main.py delete 3
  python main.py check-password 'hunter2'
  python main.py logout

Environment variables:
  PRODUCTDESK_API_URL   Base URL of the API (default: http://localhost:5001).

Signup and login input is checked locally with the same rules the server
uses, so typos are caught before a request is sent. The server still decides.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Optional

from client.api import DEFAULT_API_URL, ApiClient, ApiError
from client.session import DEFAULT_SESSION_PATH, SessionFile
from core.validators import email_error, name_error, password_error, validate_password
from products.models import CATEGORIES

W = 60  # output width


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def _print_product(product: dict[str, Any]) -> None:
    print(f"  #{product['id']}  {product['name']}")
    print(f"      {product['category']} | ${product['price']:.2f}")
    print(f"      {product['description']}")
    print(f"      image: {product['imageUrl']}")


def _print_checks(password: str) -> None:
    labels = {
        "length": "At least 8 characters",
        "uppercase": "One uppercase letter (A-Z)",
        "lowercase": "One lowercase letter (a-z)",
        "digit": "One digit (0-9)",
        "specialChar": "One special character (!@#$%^&*...)",
    }
    for flag, passed in validate_password(password).as_dict().items():
        print(f"  [{'x' if passed else ' '}] {labels[flag]}")


def _fail(message: str) -> int:
    print(f"  [!] {message}", file=sys.stderr)
    return 1


def _parse_price(raw: str) -> Optional[Decimal]:
    try:
        price = Decimal(raw)
    except InvalidOperation:
        return None
    return price if price.is_finite() and price > 0 else None


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def cmd_signup(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    problem = name_error(args.name.strip()) or email_error(args.email.strip()) or password_error(args.password)
    if problem:
        return _fail(problem)
    data = client.signup(args.name, args.email, args.password)
    session.save(data["token"], data["user"])
    if args.json:
        print(json.dumps(data["user"], indent=2))
    else:
        print(f"  Welcome, {data['user']['name']}! Account created and logged in.")
    return 0


def cmd_login(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    if email_error(args.email.strip()):
        return _fail("Please provide a valid email address")
    data = client.login(args.email, args.password)
    session.save(data["token"], data["user"])
    if args.json:
        print(json.dumps(data["user"], indent=2))
    else:
        print(f"  Logged in as {data['user']['email']}.")
    return 0


def cmd_logout(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    session.clear()
    print("  Logged out.")
    return 0


def cmd_whoami(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    user = client.me()["user"]
    if args.json:
        print(json.dumps(user, indent=2))
    else:
        print(f"  {user['name']} <{user['email']}> (id {user['id']})")
    return 0


def cmd_list(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    data = client.list_products()
    if args.json:
        print(json.dumps(data["products"], indent=2))
        return 0
    print(f"\n  My Products ({data['count']})")
    print("  " + "-" * W)
    if not data["products"]:
        print("  No products yet. Add one with: python main.py add ...")
    for product in data["products"]:
        _print_product(product)
    print()
    return 0


def cmd_show(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    product = client.get_product(args.id)["product"]
    if args.json:
        print(json.dumps(product, indent=2))
    else:
        _print_product(product)
    return 0


def cmd_add(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    price = _parse_price(args.price)
    if price is None:
        return _fail("Price must be a positive number")
    fields: dict[str, Any] = {
        "name": args.name,
        "description": args.description,
        "price": float(price),
        "category": args.category,
    }
    if args.image_url:
        fields["imageUrl"] = args.image_url
    product = client.create_product(fields)["product"]
    if args.json:
        print(json.dumps(product, indent=2))
    else:
        print(f"  Created product #{product['id']}.")
    return 0


def cmd_edit(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    fields: dict[str, Any] = {}
    for attr, key in (("name", "name"), ("description", "description"), ("category", "category")):
        value = getattr(args, attr)
        if value is not None:
            fields[key] = value
    if args.image_url is not None:
        fields["imageUrl"] = args.image_url
    if args.price is not None:
        price = _parse_price(args.price)
        if price is None:
            return _fail("Price must be a positive number")
        fields["price"] = float(price)
    if not fields:
        return _fail("Nothing to update. Pass at least one of --name, --description, --price, --category, --image-url.")
    product = client.update_product(args.id, fields)["product"]
    if args.json:
        print(json.dumps(product, indent=2))
    else:
        print(f"  Updated product #{product['id']}.")
    return 0


def cmd_delete(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    client.delete_product(args.id)
    print(f"  Deleted product #{args.id}.")
    return 0


def cmd_check_password(args: argparse.Namespace, client: ApiClient, session: SessionFile) -> int:
    _print_checks(args.password)
    problem = password_error(args.password)
    if problem:
        print(f"\n  {problem}")
        return 1
    print("\n  Password meets all requirements.")
    return 0


# Commands that can run without a stored login.
_PUBLIC = {"signup", "login", "logout", "check-password"}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="productdesk",
        description="Manage your ProductDesk products from the command line.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--api-url",
        default=os.environ.get("PRODUCTDESK_API_URL") or DEFAULT_API_URL,
        help=f"API base URL (default: $PRODUCTDESK_API_URL or {DEFAULT_API_URL})",
    )
    parser.add_argument(
        "--session",
        type=Path,
        default=DEFAULT_SESSION_PATH,
        metavar="PATH",
        help="Where the login token is stored",
    )
    parser.add_argument("--json", action="store_true", help="Print raw JSON instead of formatted text")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    p = sub.add_parser("signup", help="Create an account and log in")
    p.add_argument("--name", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.set_defaults(func=cmd_signup)

    p = sub.add_parser("login", help="Log in and store the session token")
    p.add_argument("--email", required=True)
    p.add_argument("--password", required=True)
    p.set_defaults(func=cmd_login)

    sub.add_parser("logout", help="Forget the stored session").set_defaults(func=cmd_logout)
    sub.add_parser("whoami", help="Show the logged-in user").set_defaults(func=cmd_whoami)
    sub.add_parser("list", help="List your products, newest first").set_defaults(func=cmd_list)

    p = sub.add_parser("show", help="Show one product")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("add", help="Create a product")
    p.add_argument("--name", required=True)
    p.add_argument("--description", required=True)
    p.add_argument("--price", required=True)
    p.add_argument("--category", required=True, choices=CATEGORIES)
    p.add_argument("--image-url", dest="image_url", default=None)
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("edit", help="Update fields of a product")
    p.add_argument("id", type=int)
    p.add_argument("--name")
    p.add_argument("--description")
    p.add_argument("--price")
    p.add_argument("--category", choices=CATEGORIES)
    p.add_argument("--image-url", dest="image_url")
    p.set_defaults(func=cmd_edit)

    p = sub.add_parser("delete", help="Delete a product permanently")
    p.add_argument("id", type=int)
    p.set_defaults(func=cmd_delete)

    p = sub.add_parser("check-password", help="Check a password against the strength rules")
    p.add_argument("password")
    p.set_defaults(func=cmd_check_password)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    session = SessionFile(args.session)
    stored = session.load()
    if args.command not in _PUBLIC and stored is None:
        return _fail("You are not logged in. Run: python main.py login --email ... --password ...")

    client = ApiClient(args.api_url, token=stored["token"] if stored else None)
    try:
        return args.func(args, client, session)
    except ApiError as exc:
        if exc.status == 401 and args.command not in _PUBLIC:
            session.clear()
            return _fail("Your session has expired or is invalid. Please log in again.")
        return _fail(exc.message)


if __name__ == "__main__":
    sys.exit(main())
