"""Mark certificates past their expiry date as Expired.

Intended to be run by an external scheduler (cron, systemd timer).

Usage:
  python scripts/sweep_expired_certificates.py
  python scripts/sweep_expired_certificates.py --as-of 2026-12-31
"""
import argparse
import os
import sys
from datetime import date

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from enrollment.database import SessionLocal
import enrollment.models  # noqa: F401
from enrollment.services import certificate_service


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--as-of", type=date.fromisoformat, default=None, help="Reference date (YYYY-MM-DD)")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        updated = certificate_service.sweep_expirations(db, args.as_of)
    finally:
        db.close()

    print("Certificate expiry sweep result")
    print(f"  as_of: {args.as_of or date.today()}")
    print(f"  updated: {updated}")


if __name__ == "__main__":
    main()
