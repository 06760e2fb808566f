"""CLI to exercise the Trendly API from a terminal.

Usage:
  trendly-cli health
  trendly-cli products trending --limit 3
  trendly-cli products search iphone --category Electronics
  trendly-cli register me@example.com secret123 Ada
  trendly-cli login me@example.com secret123
  trendly-cli --token $TOKEN watchlist add <product-id> 150
  trendly-cli --token $TOKEN watchlist update <product-id> --target-price 120 --no-alert
  trendly-cli --token $TOKEN products price <product-id> 179
  trendly-cli --token $TOKEN dashboard
  trendly-cli search "air max" --source all
"""
import argparse
import json
import os
import sys

import httpx


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, default=str))


def cmd_health(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/health")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_products_list(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/api/products")
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} products")
    print_json(data[: args.head] if args.head else data)
    return 0


def cmd_products_trending(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get("/api/products/trending", params={"limit": args.limit})
    r.raise_for_status()
    data = r.json()
    for product in data:
        print(f"{product['discountPercent']:6.2f}%  {product['name']} ({product['store']})")
    return 0


def cmd_products_search(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"q": args.query}
    if args.category:
        params["category"] = args.category
    if args.store:
        params["store"] = args.store
    r = client.get("/api/products/search", params=params)
    r.raise_for_status()
    data = r.json()
    print(f"Found {len(data)} products")
    print_json(data)
    return 0


def cmd_products_get(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.get(f"/api/products/{args.product_id}")
    r.raise_for_status()
    data = r.json()
    if args.head:
        data["priceHistory"] = data["priceHistory"][-args.head:]
    print_json(data)
    return 0


def cmd_products_price(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post(f"/api/products/{args.product_id}/prices", json={"price": args.price})
    r.raise_for_status()
    data = r.json()
    print(f"{data['name']}: {data['currentPrice']} ({len(data['priceHistory'])} price points)")
    return 0


def cmd_register(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {"email": args.email, "password": args.password, "name": args.name}
    r = client.post("/api/auth/register", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_login(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.post("/api/auth/login", json={"email": args.email, "password": args.password})
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_me(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/auth/me")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_watchlist_list(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/watchlist")
    r.raise_for_status()
    data = r.json()
    print(f"Watching {len(data)} products")
    print_json(data)
    return 0


def cmd_watchlist_add(client: httpx.Client, args: argparse.Namespace) -> int:
    body = {
        "productId": args.product_id,
        "targetPrice": args.target_price,
        "alertEnabled": not args.no_alert,
    }
    r = client.post("/api/watchlist", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_watchlist_update(client: httpx.Client, args: argparse.Namespace) -> int:
    body: dict[str, object] = {}
    if args.target_price is not None:
        body["targetPrice"] = args.target_price
    if args.alert is not None:
        body["alertEnabled"] = args.alert
    if not body:
        print("Nothing to update: pass --target-price and/or --alert/--no-alert", file=sys.stderr)
        return 2
    r = client.patch(f"/api/watchlist/{args.product_id}", json=body)
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_watchlist_remove(client: httpx.Client, args: argparse.Namespace) -> int:
    r = client.delete(f"/api/watchlist/{args.product_id}")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_watchlist_alerts(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/watchlist/alerts")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_dashboard(client: httpx.Client, _: argparse.Namespace) -> int:
    r = client.get("/api/dashboard/stats")
    r.raise_for_status()
    print_json(r.json())
    return 0


def cmd_search(client: httpx.Client, args: argparse.Namespace) -> int:
    params = {"q": args.query}
    if args.source:
        params["source"] = args.source
    r = client.get("/api/search", params=params)
    r.raise_for_status()
    products = r.json()["products"]
    print(f"Found {len(products)} products")
    print_json(products[: args.head] if args.head else products)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Exercise the Trendly API.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--base-url",
        default=os.getenv("TRENDLY_URL", "http://localhost:5000"),
        help="API base URL (default: $TRENDLY_URL or http://localhost:5000)",
    )
    parser.add_argument(
        "--token",
        default=os.getenv("TRENDLY_TOKEN"),
        help="Bearer token for protected routes (default: $TRENDLY_TOKEN)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds (default: 30)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True, help="Command")

    subparsers.add_parser("health", help="GET /api/health")

    # products
    products = subparsers.add_parser("products", help="Catalog routes (/api/products)")
    products_sub = products.add_subparsers(dest="products_cmd", required=True)
    p = products_sub.add_parser("list", help="GET /api/products")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")
    p = products_sub.add_parser("trending", help="GET /api/products/trending")
    p.add_argument("--limit", type=int, default=6, help="Max results (default: 6)")
    p = products_sub.add_parser("search", help="GET /api/products/search")
    p.add_argument("query", help="Text to match in name or description")
    p.add_argument("--category", default=None, help="Exact category")
    p.add_argument("--store", default=None, help="Store name")
    p = products_sub.add_parser("get", help="GET /api/products/{id}")
    p.add_argument("product_id", help="Product ID")
    p.add_argument("--head", type=int, default=0, help="Show only the last N price points (0 = all)")
    p = products_sub.add_parser("price", help="POST /api/products/{id}/prices")
    p.add_argument("product_id", help="Product ID")
    p.add_argument("price", type=float, help="Newly observed price")

    # auth
    p = subparsers.add_parser("register", help="POST /api/auth/register")
    p.add_argument("email")
    p.add_argument("password")
    p.add_argument("name", help="Display name")
    p = subparsers.add_parser("login", help="POST /api/auth/login")
    p.add_argument("email")
    p.add_argument("password")
    subparsers.add_parser("me", help="GET /api/auth/me")

    # watchlist
    watchlist = subparsers.add_parser("watchlist", help="Watchlist routes (/api/watchlist)")
    watchlist_sub = watchlist.add_subparsers(dest="watchlist_cmd", required=True)
    watchlist_sub.add_parser("list", help="GET /api/watchlist")
    p = watchlist_sub.add_parser("add", help="POST /api/watchlist")
    p.add_argument("product_id", help="Product ID")
    p.add_argument("target_price", type=float, help="Alert when the price drops to this")
    p.add_argument("--no-alert", action="store_true", help="Watch without alerts")
    p = watchlist_sub.add_parser("update", help="PATCH /api/watchlist/{productId}")
    p.add_argument("product_id", help="Product ID")
    p.add_argument("--target-price", type=float, default=None, help="New target price")
    p.add_argument(
        "--alert", action=argparse.BooleanOptionalAction, default=None, help="Toggle alerts"
    )
    p = watchlist_sub.add_parser("remove", help="DELETE /api/watchlist/{productId}")
    p.add_argument("product_id", help="Product ID")
    watchlist_sub.add_parser("alerts", help="GET /api/watchlist/alerts")

    subparsers.add_parser("dashboard", help="GET /api/dashboard/stats")

    p = subparsers.add_parser("search", help="GET /api/search (external stores)")
    p.add_argument("query", help="Search text")
    p.add_argument("--source", default=None, help="amazon, flipkart or all")
    p.add_argument("--head", type=int, default=0, help="Show only first N (0 = all)")

    return parser


HANDLERS = {
    "health": cmd_health,
    "products": {
        "list": cmd_products_list,
        "trending": cmd_products_trending,
        "search": cmd_products_search,
        "get": cmd_products_get,
        "price": cmd_products_price,
    },
    "register": cmd_register,
    "login": cmd_login,
    "me": cmd_me,
    "watchlist": {
        "list": cmd_watchlist_list,
        "add": cmd_watchlist_add,
        "update": cmd_watchlist_update,
        "remove": cmd_watchlist_remove,
        "alerts": cmd_watchlist_alerts,
    },
    "dashboard": cmd_dashboard,
    "search": cmd_search,
}


def run_command(client: httpx.Client, args: argparse.Namespace) -> int:
    """Dispatch parsed arguments to their handler; report HTTP errors on stderr."""
    handler = HANDLERS[args.command]
    if isinstance(handler, dict):
        handler = handler[getattr(args, f"{args.command}_cmd")]
    try:
        return handler(client, args)
    except httpx.HTTPStatusError as e:
        print(f"HTTP error: {e.response.status_code}", file=sys.stderr)
        if e.response.content:
            try:
                print(e.response.json().get("message", e.response.text), file=sys.stderr)
            except ValueError:
                print(e.response.text, file=sys.stderr)
        return 1
    except httpx.RequestError as e:
        print(f"Request error: {e}", file=sys.stderr)
        return 1


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    headers = {"Authorization": f"Bearer {args.token}"} if args.token else {}
    with httpx.Client(
        base_url=args.base_url.rstrip("/"), timeout=args.timeout, headers=headers
    ) as client:
        return run_command(client, args)


if __name__ == "__main__":
    sys.exit(main())
