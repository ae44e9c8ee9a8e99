#!/usr/bin/env python3
"""Seed permissions and default roles, optionally creating a SuperAdmin user."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT_DIR))

from adsguard.database import SessionLocal  # noqa: E402
from adsguard.models import User  # noqa: E402
from adsguard.rbac.roles import SUPERADMIN_ROLE  # noqa: E402
from adsguard.services import rbac_service  # noqa: E402
from adsguard.services.rbac_seed_service import seed_rbac_data  # noqa: E402

logger = logging.getLogger("seed_rbac")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--superadmin-username", help="Create this SuperAdmin user")
    parser.add_argument("--superadmin-email", help="Email of the SuperAdmin user")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
    args = parse_args(argv)
    db = SessionLocal()
    try:
        seed_rbac_data(db)
        if args.superadmin_username:
            if not args.superadmin_email:
                logger.error("--superadmin-email is required with --superadmin-username")
                return 2
            role = rbac_service.get_role_by_name(db, SUPERADMIN_ROLE)
            existing = db.query(User).filter(User.username == args.superadmin_username).first()
            if existing:
                logger.info("User %s already exists", existing.username)
            else:
                db.add(
                    User(
                        username=args.superadmin_username,
                        email=args.superadmin_email,
                        role_id=role.id,
                    )
                )
                db.commit()
                logger.info("Created SuperAdmin %s", args.superadmin_username)
    finally:
        db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
