#!/usr/bin/env python3
"""Register languages and translation keys from static bundles.

Usage:
    # Start the backend first:
    uvicorn glossa.web.app:create_app --factory --port 8080

    # Register every bundle language and key:
    python3 scripts/seed_translations.py

    # Also copy bundle values into the dynamic store:
    python3 scripts/seed_translations.py --with-values

Languages and keys that already exist are left alone (the API answers
409 and the script moves on), so seeding is safe to repeat.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"
DEFAULT_LOCALES_DIR = Path(__file__).resolve().parents[1] / "config" / "locales"

LANGUAGE_NAMES = {
    "en": "English",
    "he": "Hebrew",
    "ru": "Russian",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "ar": "Arabic",
}


def api(
    client: httpx.Client,
    method: str,
    path: str,
    *,
    json: dict | None = None,
    token: str | None = None,
    allow: tuple[int, ...] = (),
) -> dict | list | None:
    """Make an API call and return parsed JSON, or None on failure."""
    headers = {}
    if token:
        headers["Authorization"] = f"Bearer {token}"

    resp = client.request(method, path, json=json, headers=headers)
    if resp.status_code in allow:
        return None
    if resp.status_code >= 400:
        print(f"  FAILED {method} {path} -> {resp.status_code}: {resp.text[:200]}")
        return None
    return resp.json()


def load_bundles(locales_dir: Path) -> dict[str, dict[str, str]]:
    bundles = {}
    for path in sorted(locales_dir.glob("*.json")):
        with open(path, encoding="utf-8") as fh:
            bundles[path.stem] = json.load(fh)
    return bundles


def seed_languages(client: httpx.Client, codes: list[str], token: str) -> None:
    print("\nLanguages")
    for code in codes:
        created = api(
            client, "POST", "/api/admin/languages",
            json={"code": code, "name": LANGUAGE_NAMES.get(code, code)},
            token=token, allow=(409,),
        )
        print(f"  {code}: {'created' if created else 'exists'}")


def seed_keys(client: httpx.Client, keys: list[str], token: str) -> None:
    print("\nTranslation keys")
    created = 0
    for key in keys:
        category = key.split(".", 1)[0] if "." in key else None
        if api(
            client, "POST", "/api/admin/translation-keys",
            json={"key_name": key, "category": category},
            token=token, allow=(409,),
        ):
            created += 1
    print(f"  {created} created, {len(keys) - created} already present")


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Seed languages and keys from static bundles into a running Glossa backend"
    )
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Backend base URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--locales-dir",
        type=Path,
        default=DEFAULT_LOCALES_DIR,
        help="Directory of <code>.json bundles",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("GLOSSA_ADMIN_TOKEN", "dev-admin-token"),
        help="Admin bearer token (default: $GLOSSA_ADMIN_TOKEN)",
    )
    parser.add_argument(
        "--with-values",
        action="store_true",
        help="Also import bundle values as dynamic translations",
    )
    args = parser.parse_args()

    bundles = load_bundles(args.locales_dir)
    if not bundles:
        print(f"ERROR: no bundles found in {args.locales_dir}")
        sys.exit(1)

    keys = sorted({key for doc in bundles.values() for key in doc})
    print("Glossa translation seeder")
    print(f"Target:  {args.base_url}")
    print(f"Bundles: {', '.join(bundles)} ({len(keys)} distinct keys)")

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        try:
            health = api(client, "GET", "/api/health")
        except httpx.ConnectError:
            print(f"\nERROR: Cannot connect to {args.base_url}")
            print("Start the backend first:")
            print("  uvicorn glossa.web.app:create_app --factory --port 8080")
            sys.exit(1)
        if not health:
            print("\nERROR: Backend is not responding")
            sys.exit(1)

        seed_languages(client, list(bundles), args.token)
        seed_keys(client, keys, args.token)

        if args.with_values:
            print("\nValues")
            result = api(
                client, "POST", "/api/admin/translations/import",
                json=bundles, token=args.token,
            )
            if result is None:
                sys.exit(1)
            print(f"  {result['imported']} imported")
            for message in result["errors"]:
                print(f"  ERROR {message}")

    print("\nDone.")


if __name__ == "__main__":
    main()
