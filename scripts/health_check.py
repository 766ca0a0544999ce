"""System health check: reports scanner storage and API status.

Checks:
- Database connectivity and table sizes (tokens per tier, alerts)
- Redis connectivity (if configured)
- Running API: /api/health and /api/scan/status

Usage:
    python scripts/health_check.py [--api-url http://localhost:3000]
"""

import argparse
import asyncio
import json
import sys
from datetime import UTC, datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import httpx  # noqa: E402

from config.settings import settings  # noqa: E402
from src.db.database import async_session_factory, engine  # noqa: E402
from src.db.redis import close_redis, get_redis, ping_redis  # noqa: E402
from src.scanner.exceptions import StoreError  # noqa: E402
from src.scanner.store import Store  # noqa: E402

STATUS_OK = "OK"
STATUS_WARN = "WARN"
STATUS_ERROR = "ERROR"


async def check_health(api_url: str) -> dict:
    """Run all health checks and return structured report."""
    report: dict = {"timestamp": datetime.now(UTC).isoformat(), "checks": {}}

    # 1. Database
    store = Store(async_session_factory)
    try:
        await store.ping()
        report["checks"]["database"] = {
            "status": STATUS_OK,
            "tokens_by_tier": await store.counts_by_tier(),
            "alerts": await store.count_alerts(),
        }
    except StoreError as e:
        report["checks"]["database"] = {"status": STATUS_ERROR, "error": str(e)}

    # 2. Redis
    redis_ok = await ping_redis(await get_redis())
    if redis_ok is None:
        report["checks"]["redis"] = {"status": STATUS_OK, "configured": False}
    else:
        report["checks"]["redis"] = {
            "status": STATUS_OK if redis_ok else STATUS_WARN,
            "configured": True,
        }

    # 3. API
    try:
        async with httpx.AsyncClient(base_url=api_url, timeout=5) as client:
            health = (await client.get("/api/health")).json()
            scan = (await client.get("/api/scan/status")).json()
        report["checks"]["api"] = {
            "status": STATUS_OK if health.get("status") == "ok" else STATUS_WARN,
            "health": health,
            "scan_state": scan.get("state"),
            "scan_metrics": scan.get("metrics"),
        }
    except httpx.HTTPError as e:
        report["checks"]["api"] = {"status": STATUS_ERROR, "error": str(e)}

    await close_redis()
    await engine.dispose()
    return report


def main() -> None:
    parser = argparse.ArgumentParser(description="Token scanner health check")
    parser.add_argument(
        "--api-url",
        default=f"http://localhost:{settings.api_port}",
        help="Base URL of the running scanner API",
    )
    args = parser.parse_args()

    report = asyncio.run(check_health(args.api_url))
    print(json.dumps(report, indent=2, default=str))

    statuses = [c.get("status") for c in report["checks"].values()]
    sys.exit(1 if STATUS_ERROR in statuses else 0)


if __name__ == "__main__":
    main()
