"""Storefront command-line client.

Usage:
    storefront login jane@example.com --password secret
    storefront cart add <product-id> --quantity 2
    storefront cart show
    storefront orders
    storefront invoice <order-id> --download invoice.html
    storefront logout
"""

import argparse
import getpass
import json
import sys
from pathlib import Path

from client.api import StorefrontAPI, StorefrontAPIError, StorefrontUnavailable
from client.cart import CartCounter, CartRefreshSignal
from client.session import AuthSession
from client.storage import LocalStore
from shared.logging import configure_logging


def build_session(store_path=None, api=None) -> AuthSession:
    store = LocalStore(store_path)
    session = AuthSession(api or StorefrontAPI(), store, CartRefreshSignal())
    session.resume()
    return session


def _print(data):
    print(json.dumps(data, indent=2, default=str))


def cmd_login(session, args):
    password = args.password or getpass.getpass("Password: ")
    user = session.login(args.email, password)
    print(f"Signed in as {user.get('name') or user.get('email')}")
    report = session.last_merge
    if report and report.attempted:
        print(f"Merged {len(report.merged)} cart item(s); {len(report.failures)} could not be added")


def cmd_logout(session, args):
    session.logout()
    print("Signed out")


def cmd_whoami(session, args):
    if not session.is_authenticated:
        print("Not signed in")
        return
    _print(session.api.me())


def cmd_cart(session, args):
    if args.cart_command == "add":
        if session.is_authenticated:
            session.api.add_to_cart(args.product_id, args.quantity)
        else:
            session.anonymous_cart.add(args.product_id, args.quantity)
        session.refresh_signal.notify()
    elif args.cart_command == "remove":
        if session.is_authenticated:
            session.api.remove_cart_item(args.product_id)
        else:
            session.anonymous_cart.remove(args.product_id)
        session.refresh_signal.notify()
    elif args.cart_command == "show":
        if session.is_authenticated:
            _print(session.api.get_cart())
        else:
            _print({"items": session.anonymous_cart.items()})
    elif args.cart_command == "count":
        print(CartCounter(session, session.refresh_signal).refresh())


def cmd_orders(session, args):
    _print(session.api.list_orders(status=args.status))


def cmd_invoice(session, args):
    if args.download:
        html = session.api.invoice_html(args.order_id, download=True)
        Path(args.download).write_text(html, encoding="utf-8")
        print(f"Saved invoice to {args.download}")
    else:
        _print(session.api.get_invoice(args.order_id))


def build_parser():
    parser = argparse.ArgumentParser(prog="storefront", description="Storefront client")
    parser.add_argument("--store", help="Path of the local storage file (default: $STOREFRONT_HOME/storage.json)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    login_parser = subparsers.add_parser("login", help="Sign in and merge the local cart")
    login_parser.add_argument("email")
    login_parser.add_argument("--password")
    login_parser.set_defaults(handler=cmd_login)

    subparsers.add_parser("logout", help="Sign out").set_defaults(handler=cmd_logout)
    subparsers.add_parser("whoami", help="Show the signed-in user").set_defaults(handler=cmd_whoami)

    cart_parser = subparsers.add_parser("cart", help="Work with the cart")
    cart_sub = cart_parser.add_subparsers(dest="cart_command", required=True)
    add_parser = cart_sub.add_parser("add")
    add_parser.add_argument("product_id")
    add_parser.add_argument("--quantity", type=int, default=1)
    remove_parser = cart_sub.add_parser("remove")
    remove_parser.add_argument("product_id")
    cart_sub.add_parser("show")
    cart_sub.add_parser("count")
    cart_parser.set_defaults(handler=cmd_cart)

    orders_parser = subparsers.add_parser("orders", help="List your orders")
    orders_parser.add_argument("--status")
    orders_parser.set_defaults(handler=cmd_orders)

    invoice_parser = subparsers.add_parser("invoice", help="Fetch an order's invoice")
    invoice_parser.add_argument("order_id")
    invoice_parser.add_argument("--download", metavar="PATH", help="Save the HTML invoice to PATH")
    invoice_parser.set_defaults(handler=cmd_invoice)

    return parser


def main(argv=None):
    configure_logging(log_dir=None)
    parser = build_parser()
    args = parser.parse_args(argv)
    session = build_session(args.store)

    try:
        args.handler(session, args)
    except StorefrontAPIError as exc:
        print(f"Error: {exc.message} (HTTP {exc.status_code})", file=sys.stderr)
        sys.exit(1)
    except StorefrontUnavailable as exc:
        print(f"Error: storefront API unreachable ({exc})", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
