#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import random

import requests

PRODUCTS = ["Mechanical Keyboard", "USB-C Hub", "Laptop Stand", "Webcam", "Desk Lamp", "Portable SSD"]
CUSTOMERS = ["Ada Lovelace", "Grace Hopper", "Alan Turing", "Barbara Liskov", "Donald Knuth"]


def _payload(rng: random.Random) -> dict:
    name = rng.choice(CUSTOMERS)
    return {
        "customer_name": name,
        "customer_email": name.lower().replace(" ", ".") + "@example.com",
        "items": [
            {
                "product_name": rng.choice(PRODUCTS),
                "quantity": rng.randint(1, 5),
                "unit_price": round(rng.uniform(5, 500), 2),
            }
            for _ in range(rng.randint(1, 4))
        ],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Create sample orders through a running Order Management API")
    parser.add_argument("--base-url", default="http://localhost:8000")
    parser.add_argument("--count", type=int, default=10)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    rng = random.Random(args.seed)
    created = []
    for _ in range(args.count):
        resp = requests.post(f"{args.base_url}/orders", json=_payload(rng), timeout=30)
        resp.raise_for_status()
        order = resp.json()["data"]
        created.append({"order_number": order["order_number"], "total": order["total_amount"]["formatted"]})
    print(json.dumps(created, indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
