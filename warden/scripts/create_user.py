"""
Create a user (e.g. the first admin). Run from project root after seeding:
  python -m warden.scripts.create_user USERNAME PASSWORD [--email EMAIL] [--role ROLE]
Example:
  python -m warden.scripts.create_user admin your-secure-password --role Admin
"""
import argparse
import sys

from warden.core.database import SessionLocal
from warden.core.errors import RbacError
from warden.services import roles as role_store
from warden.services import users as user_store


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Warden user.")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (1-128 chars)")
    parser.add_argument("--email", default=None, help="Email address")
    parser.add_argument(
        "--role",
        default=None,
        help="Extra role to assign besides the default one (e.g. Admin)",
    )
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > 255:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not args.password or len(args.password) > 128:
        print("Password must be 1-128 characters.", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        role = None
        if args.role:
            role = role_store.find_role_by_name(db, args.role)
            if role is None:
                print(f"Role '{args.role}' does not exist; run the seed first.", file=sys.stderr)
                return 1
        user = user_store.register(db, username, args.password, args.email)
        if role is not None:
            role_store.link_user_role(db, user.id, role.id)
        print(f"Created user '{username}' (id={user.id}).")
        return 0
    except RbacError as e:
        print(e.message, file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
