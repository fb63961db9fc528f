"""
Seed permissions, roles and the root user. Run from project root after migrating:
  python -m app.scripts.seed ROOT_PASSWORD
"""
import argparse
import logging
import sys

from app.core.database import SessionLocal
from app.core.errors import StorageError, ValidationError
from app.services.seed import seed_rbac

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
    datefmt="%Y-%m-%dT%H:%M:%SZ",
)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed RBAC permissions, roles and root user.")
    parser.add_argument("root_password", help="Password for the root user (8-128 chars)")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        root = seed_rbac(db, args.root_password)
        print(f"Seed complete; root user id {root.id}.")
        return 0
    except ValidationError as e:
        for field, messages in e.errors.items():
            print(f"{field}: {', '.join(messages)}", file=sys.stderr)
        return 1
    except StorageError as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
