"""
Checkout Simulation Script

Fires concurrent checkouts at a running development server:
create gateway order -> sign payment with the mock key -> verify.
Also replays one verification to show that duplicates are accepted.

Run from project root: python scripts/simulate.py --orders 20
"""

import argparse
import asyncio
import os
import random
import sys
import time
import uuid
from datetime import date, datetime
from typing import Any

import httpx

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from orderdesk.services.payment import compute_signature  # noqa: E402
from orderdesk.services.payment.mock import MOCK_KEY_SECRET  # noqa: E402

# Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:3000")
KEY_SECRET = os.getenv("GATEWAY_KEY_SECRET") or MOCK_KEY_SECRET

FIRST_NAMES = ["Aarav", "Diya", "Kabir", "Meera", "Rohan", "Isha", "Vivaan", "Anaya"]
ORDER_TYPES = ["dine-in", "takeaway", "delivery"]
MENU_ITEMS = [
    {"name": "Margherita", "price": 199.0},
    {"name": "Pepperoni", "price": 279.0},
    {"name": "Farmhouse", "price": 249.0},
    {"name": "Garlic Bread", "price": 99.0},
    {"name": "Cold Coffee", "price": 89.0},
]


def generate_order_payload() -> dict[str, Any]:
    """Generate a random order payload."""
    order_type = random.choice(ORDER_TYPES)
    items = [
        {**item, "qty": random.randint(1, 3)}
        for item in random.sample(MENU_ITEMS, random.randint(1, 3))
    ]
    return {
        "orderType": order_type,
        "customerName": random.choice(FIRST_NAMES),
        "mobile": f"98{random.randint(10000000, 99999999)}",
        "tableNumber": str(random.randint(1, 20)) if order_type == "dine-in" else None,
        "address": "12 MG Road" if order_type == "delivery" else None,
        "items": items,
    }


async def checkout(client: httpx.AsyncClient, order_num: int) -> dict[str, Any]:
    """Run one checkout end to end."""
    payload = generate_order_payload()
    amount = sum(i["price"] * i["qty"] for i in payload["items"])
    start_time = time.time()

    try:
        created = await client.post("/api/payments/create-order", json={"amount": amount})
        created.raise_for_status()
        gateway_order_id = created.json()["id"]
        gateway_payment_id = f"pay_sim_{uuid.uuid4().hex[:14]}"

        response = await client.post(
            "/api/payments/verify-and-create-order",
            json={
                "gatewayOrderId": gateway_order_id,
                "gatewayPaymentId": gateway_payment_id,
                "signature": compute_signature(KEY_SECRET, gateway_order_id, gateway_payment_id),
                "orderPayload": payload,
            },
        )
        elapsed = round(time.time() - start_time, 3)
        data = response.json()

        if data.get("success"):
            return {
                "order_num": order_num,
                "success": True,
                "order_id": data["order"]["id"],
                "total": data["order"]["total"],
                "time": elapsed,
            }
        return {"order_num": order_num, "success": False, "error": "signature rejected", "time": elapsed}

    except (httpx.HTTPError, KeyError, ValueError) as e:
        elapsed = round(time.time() - start_time, 3)
        return {"order_num": order_num, "success": False, "error": str(e)[:100], "time": elapsed}


async def run_simulation(num_orders: int) -> dict[str, Any]:
    print("=" * 70)
    print("🔥 CHECKOUT SIMULATION")
    print("=" * 70)
    print(f"📋 Total Orders: {num_orders}")
    print(f"🎯 Target: {API_BASE_URL}")
    print(f"⏰ Started: {datetime.now().strftime('%H:%M:%S')}")
    print("=" * 70)

    start_time = time.time()
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        results = await asyncio.gather(*(checkout(client, i + 1) for i in range(num_orders)))

        sales = (await client.get("/api/dashboard/sales", params={"date": date.today().isoformat()})).json()
        top = (await client.get("/api/dashboard/topdish", params={"date": date.today().isoformat()})).json()

    total_time = round(time.time() - start_time, 2)
    successful = [r for r in results if r["success"]]
    failed = [r for r in results if not r["success"]]

    print(f"\n✅ Successful Orders: {len(successful)}/{num_orders}")
    print(f"❌ Failed Orders: {len(failed)}/{num_orders}")
    print(f"⏱️  Total Time: {total_time}s")

    if successful:
        avg_time = round(sum(r["time"] for r in successful) / len(successful), 3)
        print(f"   Average Checkout: {avg_time}s")
        print(f"   💰 Simulated Revenue: ₹{sum(r['total'] for r in successful):.2f}")

    print(f"\n📊 Dashboard today: ₹{sales.get('total')} over {sales.get('count')} orders")
    print(f"🍕 Top dish: {top}")

    for f in failed[:5]:
        print(f"   Order #{f['order_num']}: {f.get('error')}")

    return {"total": num_orders, "successful": len(successful), "failed": len(failed)}


async def replay_verification() -> None:
    """Submit the same valid payment proof twice; both are accepted."""
    async with httpx.AsyncClient(base_url=API_BASE_URL, timeout=30.0) as client:
        created = (await client.post("/api/payments/create-order", json={"amount": 199})).json()
        body = {
            "gatewayOrderId": created["id"],
            "gatewayPaymentId": "pay_replay",
            "signature": compute_signature(KEY_SECRET, created["id"], "pay_replay"),
            "orderPayload": {"orderType": "takeaway", "items": [{"name": "Margherita", "price": 199, "qty": 1}]},
        }
        first = (await client.post("/api/payments/verify-and-create-order", json=body)).json()
        second = (await client.post("/api/payments/verify-and-create-order", json=body)).json()

    print("\n🔁 Replay check")
    print(f"   First:  order #{first['order']['id']}")
    print(f"   Second: order #{second['order']['id']} (duplicate accepted)")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Checkout Simulation Script")
    parser.add_argument("--orders", type=int, default=20, help="Number of orders")
    parser.add_argument("--replay", action="store_true", help="Also replay one verification")
    args = parser.parse_args()

    asyncio.run(run_simulation(args.orders))
    if args.replay:
        asyncio.run(replay_verification())
