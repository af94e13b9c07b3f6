# scripts/import_invitations.py
# =============================================================================
# 🚚 Bulk invitation importer (talks to the running backend).
# - Validates/normalizes the sheet (xlsx/csv) with invitation_service.importer.
# - Sends each valid row to POST /api/invitations, one request per row, so
#   every invitation gets its own slug and QR url.
# - --dry-run only validates and prints a preview.
# =============================================================================

import argparse
import json
import os
import sys
from pathlib import Path

import requests
from dotenv import load_dotenv

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

from invitation_service.importer import load_guest_list  # noqa: E402

load_dotenv()

API_BASE_URL = os.getenv("API_BASE_URL", "http://127.0.0.1:8081")
ENDPOINT = f"{API_BASE_URL.rstrip('/')}/api/invitations"


def _post_one(session: requests.Session, record: dict, timeout: int = 15) -> dict:
    """Creates one invitation and returns the JSON answer (or raises with the API's error)."""
    resp = session.post(ENDPOINT, json=record, timeout=timeout)
    if resp.status_code != 201:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        raise RuntimeError(f"HTTP {resp.status_code} - {detail}")
    return resp.json()


def main():
    parser = argparse.ArgumentParser(description="Bulk invitation importer.")
    parser.add_argument("file", help="Path to the .xlsx/.xls or .csv file")
    parser.add_argument("--sheet", default=None, help="Excel sheet name (optional)")
    parser.add_argument("--sep", default=",", help="CSV separator (default ',')")
    parser.add_argument("--encoding", default="utf-8", help="CSV encoding (default utf-8)")
    parser.add_argument("--strict", action="store_true", help="Abort if any row fails validation")
    parser.add_argument("--dry-run", action="store_true", help="Validate and preview only; send nothing")
    args = parser.parse_args()

    print(f"📥 Loading file: {args.file}")
    try:
        records, errors = load_guest_list(
            args.file, sheet_name=args.sheet, csv_sep=args.sep, csv_encoding=args.encoding
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"❌ Validation error: {e}")
        sys.exit(1)

    if errors:
        print("⚠️  Rows rejected during validation:")
        print(" - " + "\n - ".join(errors))
        if args.strict:
            sys.exit(1)

    if not records:
        print("⛔ Nothing to import.")
        sys.exit(1)

    print(f"📦 Records ready to import: {len(records)}")

    if args.dry_run:
        print("🧪 DRY-RUN: nothing will be sent to the backend.")
        print("🔎 Preview (first 3 records):")
        print(json.dumps(records[:3], indent=2, ensure_ascii=False))
        sys.exit(0)

    created = 0
    failures = []
    print(f"➡️  Importing into {ENDPOINT}")
    with requests.Session() as session:
        for idx, record in enumerate(records, start=1):
            try:
                result = _post_one(session, record)
                created += 1
                print(f"   ✓ {record['name']} → {result.get('slug')}")
            except (requests.RequestException, RuntimeError) as e:
                msg = f"Record {idx} ({record.get('name')}): {e}"
                print(f"   ✗ {msg}")
                failures.append(msg)

    print("\n✅ Import summary:")
    print(json.dumps(
        {"created": created, "failed": len(failures), "errors": failures + errors},
        indent=2, ensure_ascii=False,
    ))


if __name__ == "__main__":
    main()
