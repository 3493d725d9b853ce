#!/usr/bin/env python3
"""Export dynamic translations to a JSON file, or import them from one.

Usage:
    python3 scripts/transfer_translations.py export translations.json
    python3 scripts/transfer_translations.py export all.json --include-inactive
    python3 scripts/transfer_translations.py import translations.json

The file maps language codes to flat key/value maps. Import reports every
failed entry and exits with status 2 if any entry failed; entries that
succeeded stay applied.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path

import httpx

DEFAULT_BASE_URL = "http://localhost:8080"


def export_translations(
    client: httpx.Client, path: Path, include_inactive: bool
) -> None:
    resp = client.get(
        "/api/admin/translations/export",
        params={"include_inactive": str(include_inactive).lower()},
    )
    resp.raise_for_status()
    data = resp.json()
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, ensure_ascii=False, indent=2, sort_keys=True)
        fh.write("\n")
    total = sum(len(entries) for entries in data.values())
    print(f"Exported {total} translations in {len(data)} languages to {path}")


def import_translations(client: httpx.Client, path: Path) -> int:
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    resp = client.post("/api/admin/translations/import", json=data)
    resp.raise_for_status()
    result = resp.json()
    print(f"Imported {result['imported']} translations from {path}")
    for message in result["errors"]:
        print(f"  ERROR {message}")
    return 2 if result["errors"] else 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Move dynamic translations between a Glossa backend and a JSON file"
    )
    parser.add_argument("direction", choices=["export", "import"])
    parser.add_argument("path", type=Path)
    parser.add_argument(
        "--base-url",
        default=DEFAULT_BASE_URL,
        help=f"Backend base URL (default: {DEFAULT_BASE_URL})",
    )
    parser.add_argument(
        "--token",
        default=os.environ.get("GLOSSA_ADMIN_TOKEN", "dev-admin-token"),
        help="Admin bearer token (default: $GLOSSA_ADMIN_TOKEN)",
    )
    parser.add_argument(
        "--include-inactive",
        action="store_true",
        help="Export translations of inactive languages too",
    )
    args = parser.parse_args()

    headers = {"Authorization": f"Bearer {args.token}"}
    with httpx.Client(base_url=args.base_url, headers=headers, timeout=60.0) as client:
        try:
            if args.direction == "export":
                export_translations(client, args.path, args.include_inactive)
                status = 0
            else:
                status = import_translations(client, args.path)
        except httpx.HTTPStatusError as exc:
            print(f"ERROR: {exc.response.status_code} {exc.response.text[:200]}")
            sys.exit(1)
        except httpx.ConnectError:
            print(f"ERROR: Cannot connect to {args.base_url}")
            sys.exit(1)
    sys.exit(status)


if __name__ == "__main__":
    main()
