"""Smoke-check a running instance's HTTP contract.

Only exercises paths that neither charge a card nor send email, unless
`--send-signup` is given (which emails the operator address once).
"""

import argparse
import asyncio
import sys

import httpx

BILL_FIELDS = {
    "customerName": "Smoke Check",
    "street": "1 Main St",
    "city": "Hot Springs",
    "state": "AR",
    "zip": "71901",
    "amount": 1.25,
    "receiptEmail": "smoke@example.com",
}


async def check(client: httpx.AsyncClient, label: str, method: str, path: str, expected: set[int], **kwargs) -> bool:
    """Send one request and report whether the status code was expected."""

    resp = await client.request(method, path, **kwargs)
    ok = resp.status_code in expected
    print(f"{'ok ' if ok else 'BAD'} {label}: {resp.status_code} {resp.text[:120]}")
    return ok


async def run(base_url: str, send_signup: bool) -> bool:
    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        results = [
            await check(client, "health", "GET", "/health", {200}),
            await check(client, "config", "GET", "/api/config", {200}),
            await check(client, "bill page", "GET", "/bill-pay.html", {200}),
            await check(
                client,
                "amount below minimum",
                "POST",
                "/api/create-payment-intent",
                {400, 503},
                json={"amount": 0.25},
            ),
            await check(
                client,
                "bill missing fields",
                "POST",
                "/api/submit-bill",
                {400},
                json={"customerName": "Smoke Check"},
            ),
            await check(client, "bill without payment", "POST", "/api/submit-bill", {400}, json=BILL_FIELDS),
            await check(client, "signup missing email", "POST", "/api/submit-new-customer", {400}, json={"name": "x"}),
        ]
        if send_signup:
            results.append(
                await check(
                    client,
                    "signup",
                    "POST",
                    "/api/submit-new-customer",
                    {200},
                    json={"name": "Smoke Check", "email": "smoke@example.com", "notes": "automated smoke check"},
                )
            )
    return all(results)


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--base-url", default="http://localhost:3000")
    parser.add_argument("--send-signup", action="store_true")
    args = parser.parse_args()
    sys.exit(0 if asyncio.run(run(args.base_url, args.send_signup)) else 1)
