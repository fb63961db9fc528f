"""
Create a user and assign permissions/roles by code. Run from project root:
  python -m app.scripts.create_user NAME EMAIL USERNAME PASSWORD [--permission CODE ...] [--role CODE ...]
Example:
  python -m app.scripts.create_user "Jane Doe" jane@local jane your-secure-password --role ADMIN
"""
import argparse
import sys

from app.core.database import SessionLocal
from app.core.errors import NotFound, StorageError, ValidationError
from app.services.identity import resolve_identity
from app.services.users import create_user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user (no registration UI).")
    parser.add_argument("name", help="Display name")
    parser.add_argument("email", help="Email (stored lowercase)")
    parser.add_argument("username", help="Username (1-255 chars, stored lowercase)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "--permission", action="append", default=[], metavar="CODE",
        help="Permission code to assign (repeatable), e.g. CREATE_USER",
    )
    parser.add_argument(
        "--role", action="append", default=[], metavar="CODE",
        help="Role code to assign (repeatable), e.g. ADMIN",
    )
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user = create_user(
            db,
            name=args.name,
            email=args.email,
            username=args.username,
            password=args.password,
            permission_codes=args.permission,
            role_codes=args.role,
        )
        identity = resolve_identity(db, user.id)
        print(f"Created user '{user.username}' ({user.id}).")
        print(f"  permissions: {', '.join(sorted(identity.permission_codes)) or '-'}")
        print(f"  roles: {', '.join(sorted(identity.role_codes)) or '-'}")
        return 0
    except ValidationError as e:
        for field, messages in e.errors.items():
            print(f"{field}: {', '.join(messages)}", file=sys.stderr)
        return 1
    except (NotFound, StorageError) as e:
        print(str(e), file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
