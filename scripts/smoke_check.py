"""
Smoke Check Script

Walks the main flows of a running MenuCup server: health, public menu,
JSON API, login, menu-builder actions and the demo-request form.
Run from project root (after scripts/seed_demo.py):

    python scripts/smoke_check.py --base-url http://localhost:8001

Author: Khalil Bannouri
Version: 1.0.0
"""

import argparse
import asyncio
import sys
import time
from datetime import datetime

import httpx

# Windows event loop fix
if sys.platform == "win32":
    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

DEMO_SLUG = "joes-bar"


class Report:
    """Collects pass/fail lines and prints them as they come."""

    def __init__(self):
        self.passed = 0
        self.failed = 0

    def check(self, label: str, ok: bool, detail: str = "") -> bool:
        if ok:
            self.passed += 1
            print(f"   ✅ {label}")
        else:
            self.failed += 1
            print(f"   ❌ {label}" + (f": {detail}" if detail else ""))
        return ok


async def run_checks(base_url: str, email: str, password: str) -> bool:
    report = Report()
    started = time.perf_counter()

    print("=" * 70)
    print("🔎 MENUCUP SMOKE CHECK")
    print("=" * 70)
    print(f"⏰ Timestamp: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")
    print(f"🌐 Server: {base_url}")
    print("=" * 70)

    async with httpx.AsyncClient(base_url=base_url, timeout=10.0) as client:
        # 1. Health
        print("\n1️⃣ Health Check...")
        try:
            response = await client.get("/health")
        except httpx.HTTPError as e:
            report.check("Server reachable", False, str(e))
            print("\n❌ Server is not running. Start it with: uvicorn menucup.main:app --port 8001")
            return False
        data = response.json()
        report.check(f"Status: {data.get('status')}", response.status_code == 200, response.text[:100])
        print(f"   Database: {data.get('database')} | Auth: {data.get('auth_service')} | "
              f"Storage: {data.get('storage_service')} | Email: {data.get('email_service')}")

        # 2. Public pages
        print("\n2️⃣ Public Menu...")
        response = await client.get(f"/{DEMO_SLUG}")
        report.check(f"/{DEMO_SLUG} renders", response.status_code == 200, f"HTTP {response.status_code}")
        response = await client.get("/no-such-restaurant")
        report.check("Unknown slug is 404", response.status_code == 404, f"HTTP {response.status_code}")

        # 3. JSON API reads
        print("\n3️⃣ Restaurant API...")
        response = await client.get(f"/api/restaurants/{DEMO_SLUG}")
        restaurant = response.json() if response.status_code == 200 else {}
        report.check("Restaurant by slug", response.status_code == 200, response.text[:100])
        response = await client.get(f"/api/restaurants/{DEMO_SLUG}/categories")
        categories = response.json() if response.status_code == 200 else []
        report.check(f"{len(categories)} categories listed", response.status_code == 200, response.text[:100])
        response = await client.post("/api/restaurants", json={"name": "Anonymous"})
        report.check("Anonymous write is 401", response.status_code == 401, f"HTTP {response.status_code}")

        # 4. Login
        print("\n4️⃣ Login...")
        response = await client.post("/login", data={"email": email, "password": password})
        logged_in = response.status_code == 303
        report.check(f"Signed in as {email}", logged_in, f"HTTP {response.status_code}")

        # 5. Menu builder
        if logged_in and restaurant:
            print("\n5️⃣ Menu Builder...")
            base = f"/dashboard/api/restaurants/{restaurant['id']}"
            response = await client.get(f"{base}/menu", params={"refresh": "true"})
            snapshot = response.json() if response.status_code == 200 else {}
            report.check(
                f"Snapshot: {len(snapshot.get('items', []))} items",
                response.status_code == 200,
                response.text[:100],
            )

            response = await client.post(f"{base}/categories", json={"name": f"Smoke {int(time.time())}"})
            created = response.json().get("data") or {}
            report.check("Category created", response.status_code == 201, response.text[:100])
            if created.get("id"):
                response = await client.delete(f"{base}/categories/{created['id']}")
                report.check("Category deleted", response.status_code == 200, response.text[:100])

            response = await client.post(f"{base}/qr-code")
            qr = (response.json().get("data") or {}).get("qr_code_url")
            report.check(f"QR code: {qr}", response.status_code == 200, response.text[:100])

            response = await client.post("/logout")
            report.check("Signed out", response.status_code == 303, f"HTTP {response.status_code}")

        # 6. Demo request form
        print("\n6️⃣ Demo Request Form...")
        response = await client.post("/contact", data={
            "fullName": "Smoke Check",
            "email": "smoke@example.com",
            "companyName": "Smoke Test Bistro",
        })
        report.check("Lead delivered", response.status_code == 200, response.text[:100])

    elapsed = time.perf_counter() - started
    print("\n" + "=" * 70)
    print(f"📊 RESULTS: {report.passed} passed, {report.failed} failed ({elapsed:.2f}s)")
    print("=" * 70)
    return report.failed == 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="MenuCup smoke check")
    parser.add_argument("--base-url", default="http://localhost:8001", help="Server URL")
    parser.add_argument("--email", default="owner@menucup.dev", help="Login email")
    parser.add_argument("--password", default="owner123", help="Login password")
    args = parser.parse_args()

    ok = asyncio.run(run_checks(args.base_url.rstrip("/"), args.email, args.password))
    sys.exit(0 if ok else 1)
