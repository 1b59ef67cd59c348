#!/usr/bin/env python3
"""
Cancellation and refund flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Tokens are minted locally with the shared JWT secret, standing in for the
external auth provider. The guest must already be ID-verified.

Usage:
    python scripts/flow_cancel_and_refund.py --guest-id <ID> --host-id <ID> --vehicle-id <ID> \
        --start 2026-12-01T09:00:00+08:00 --end 2026-12-03T09:00:00+08:00 --total 5000

Flow:
    1. Create booking as guest
    2. Preview refund
    3. Cancel booking
    4. List pending refunds as admin
    5. Settle refund with a GCash reference
"""

import argparse
import json
import sys

import httpx

from cardnd.core.security import create_access_token


def token_for(user_id: str, role: str) -> str:
    return create_access_token({"sub": user_id, "role": role})


def api_request(client: httpx.Client, token: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Call the API as the token's user and keep the status next to the body."""
    response = client.request(
        method,
        endpoint,
        headers={"Authorization": f"Bearer {token}"},
        json=data if method != "GET" else None,
    )

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    if fields:
        filtered = {k: result["data"].get(k) for k in fields if k in result["data"]}
        print(json.dumps(filtered, indent=2))
    else:
        print(json.dumps(result["data"], indent=2))
    return True


def main():
    parser = argparse.ArgumentParser(description="Cancellation and refund flow")
    parser.add_argument("--base-url", default="http://localhost:8000", help="API base URL")
    parser.add_argument("--guest-id", required=True, help="Verified guest user ID")
    parser.add_argument("--host-id", required=True, help="Host user ID")
    parser.add_argument("--admin-id", default="admin", help="Admin user ID")
    parser.add_argument("--vehicle-id", required=True, help="Vehicle ID")
    parser.add_argument("--start", required=True, help="Start (ISO 8601)")
    parser.add_argument("--end", required=True, help="End (ISO 8601)")
    parser.add_argument("--total", required=True, help="Total price")
    parser.add_argument("--reference", default="GCASH-REF-0001", help="GCash reference number")
    parser.add_argument("--cancel-reason", default="Change of travel plans", help="Cancellation reason")
    args = parser.parse_args()

    guest_token = token_for(args.guest_id, "guest")
    admin_token = token_for(args.admin_id, "admin")

    with httpx.Client(base_url=args.base_url, timeout=10.0, follow_redirects=True) as client:
        run_flow(client, args, guest_token, admin_token)


def run_flow(client: httpx.Client, args: argparse.Namespace, guest_token: str, admin_token: str) -> None:
    # Step 1: Create booking
    print_step(1, "Create booking")
    booking_result = api_request(client, guest_token, "POST", "/api/v1/bookings/", {
        "host_id": args.host_id,
        "vehicle_id": args.vehicle_id,
        "start_date": args.start,
        "end_date": args.end,
        "total_price": args.total,
    })
    if not print_result(booking_result, ["id", "total_price", "service_fee", "host_earnings", "status"]):
        sys.exit(1)
    booking_id = booking_result["data"]["id"]

    # Step 2: Preview refund
    print_step(2, "Preview refund")
    quote_result = api_request(client, guest_token, "GET", f"/api/v1/bookings/{booking_id}/refund-quote")
    if not print_result(quote_result):
        sys.exit(1)

    # Step 3: Cancel booking
    print_step(3, "Cancel booking")
    cancel_result = api_request(client, guest_token, "POST", f"/api/v1/bookings/{booking_id}/cancel", {
        "reason": args.cancel_reason,
    })
    if not print_result(cancel_result, ["id", "refund_amount", "refund_percentage", "policy_label", "refund_status"]):
        sys.exit(1)
    cancellation = cancel_result["data"]

    if cancellation["refund_status"] != "pending":
        print("\nNo refund owed; flow complete.")
        return

    # Step 4: List pending refunds
    print_step(4, "List pending refunds (admin)")
    pending_result = api_request(client, admin_token, "GET", "/api/v1/refunds/cancellations?refund_status=pending")
    if not print_result(pending_result, ["total", "total_pending_refunds"]):
        sys.exit(1)

    # Step 5: Settle refund
    print_step(5, "Settle refund (admin)")
    settle_result = api_request(
        client,
        admin_token,
        "POST",
        f"/api/v1/refunds/cancellations/{cancellation['id']}/settle",
        {"reference_number": args.reference},
    )
    if not print_result(settle_result, ["id", "refund_amount", "reference_number", "status"]):
        sys.exit(1)

    print("\nFlow complete.")


if __name__ == "__main__":
    main()
