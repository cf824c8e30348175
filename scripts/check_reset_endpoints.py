"""
Smoke-test the reset endpoints of a running deployment.

Hits the status, manual trigger and cron endpoints and prints what each
one reported. Exits non-zero if any endpoint misbehaves.
"""

from __future__ import annotations

import argparse
import os

import requests

REQUEST_TIMEOUT = 30  # seconds


def _body(response: requests.Response) -> dict:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def check_status(base_url: str) -> bool:
    print("Checking status endpoint...")
    response = requests.get(f"{base_url}/api/admin/reset-status", timeout=REQUEST_TIMEOUT)
    body = _body(response)
    if response.status_code != 200:
        print(f"  FAILED ({response.status_code}): {body.get('error', 'Unknown error')}")
        return False
    health = body.get("health", {})
    print(f"  Health: {health.get('overall', 'unknown')}")
    print(f"  Reset enabled: {body.get('configuration', {}).get('enabled')}")
    print(f"  Next reset: {body.get('schedule', {}).get('nextReset', 'not scheduled')}")
    for issue in health.get("issues", []):
        print(f"  - {issue}")
    return True


def check_manual_trigger(base_url: str, admin_key: str, dry_run: bool) -> bool:
    print("Checking manual trigger endpoint...")
    response = requests.post(
        f"{base_url}/api/admin/trigger-reset",
        json={"adminKey": admin_key, "dryRun": dry_run, "force": True},
        timeout=REQUEST_TIMEOUT,
    )
    body = _body(response)
    if response.status_code == 401:
        print("  FAILED: invalid admin key (check ADMIN_API_KEY)")
        return False
    if response.status_code != 200:
        print(f"  FAILED ({response.status_code}): {body.get('error', 'Unknown error')}")
        return False
    if body.get("dryRun"):
        print(f"  Dry run OK, would call {body.get('wouldReset', {}).get('endpoint')}")
    else:
        print(f"  Reset completed in {body.get('duration')}ms")
        print(f"  Records affected: {body.get('recordsAffected')}")
    return True


def check_cron(base_url: str, cron_secret: str, dry_run: bool) -> bool:
    print("Checking cron endpoint...")
    response = requests.post(
        f"{base_url}/api/cron/database-reset",
        headers={"Authorization": f"Bearer {cron_secret}"},
        # Without force a disabled reset system answers with skipped=true.
        json={"force": not dry_run},
        timeout=REQUEST_TIMEOUT,
    )
    body = _body(response)
    if response.status_code == 401:
        print("  FAILED: invalid cron secret (check CRON_SECRET)")
        return False
    if response.status_code != 200:
        print(f"  FAILED ({response.status_code}): {body.get('error', 'Unknown error')}")
        return False
    if body.get("skipped"):
        print("  Skipped: reset system is disabled")
    else:
        print(f"  Reset completed in {body.get('duration')}ms")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Check demo reset endpoints")
    parser.add_argument(
        "--url",
        default=os.environ.get("FREELANCEOS_URL", "http://localhost:8000"),
        help="Base URL of the deployment",
    )
    parser.add_argument(
        "--admin-key",
        default=os.environ.get("ADMIN_API_KEY", ""),
        help="Admin API key for the manual trigger",
    )
    parser.add_argument(
        "--cron-secret",
        default=os.environ.get("CRON_SECRET", ""),
        help="Cron secret for the scheduled trigger",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Do not actually reset any data",
    )
    args = parser.parse_args()
    base_url = args.url.rstrip("/")

    results = {}
    for name, check in (
        ("status", lambda: check_status(base_url)),
        ("manual", lambda: check_manual_trigger(base_url, args.admin_key, args.dry_run)),
        ("cron", lambda: check_cron(base_url, args.cron_secret, args.dry_run)),
    ):
        try:
            results[name] = check()
        except requests.RequestException as exc:
            print(f"  ERROR: {exc}")
            results[name] = False

    print("-" * 50)
    for name, passed in results.items():
        print(f"{name:>8}: {'ok' if passed else 'FAILED'}")
    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    raise SystemExit(main())
