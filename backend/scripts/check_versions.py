"""Sweep content version history for inconsistencies.

Usage:
  python scripts/check_versions.py              # every content item
  python scripts/check_versions.py --id 12      # one content item
"""
import argparse
import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.database import SessionLocal
from app.models.content import ContentItem
from app.models.content_version import ContentVersion
from app.services import version_service


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--id", type=int, dest="content_id", help="Only check this content id")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        if args.content_id is not None:
            content_ids = [args.content_id]
        else:
            # Include ids that only survive in the version table.
            content_ids = sorted(
                {row[0] for row in db.query(ContentItem.content_id).all()}
                | {row[0] for row in db.query(ContentVersion.content_id).distinct().all()}
            )
        report = {cid: version_service.find_version_inconsistencies(db, cid) for cid in content_ids}
    finally:
        db.close()

    broken = {cid: issues for cid, issues in report.items() if issues}
    print("Content version consistency")
    print(f"  checked: {len(report)}")
    print(f"  inconsistent: {len(broken)}")
    for cid, issues in broken.items():
        print(f"  content {cid}:")
        for issue in issues:
            print(f"    - {issue}")
    return 1 if broken else 0


if __name__ == "__main__":
    sys.exit(main())
