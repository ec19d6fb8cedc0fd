#!/usr/bin/env python
"""Idempotent seed script for permissions, roles and demo users.

Usage:
    python backend/scripts/seed_authz.py               # seed normally
    python backend/scripts/seed_authz.py --show-roles  # print role -> permissions (after ensuring seed)
    python backend/scripts/seed_authz.py --dry-run     # run logic then rollback (no DB changes)
    python backend/scripts/seed_authz.py --no-users    # permissions & roles only
"""
from __future__ import annotations
import os, sys, argparse, textwrap, json

# Allow running from repo root
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from sqlalchemy import inspect  # noqa: E402
from approvals import create_app, get_db  # noqa: E402
from approvals.models.authz import Base  # noqa: E402
import approvals.models.transaction  # noqa: E402,F401
from approvals.services.seed import seed_all, build_role_permission_map  # noqa: E402


def print_role_summary(role_map):
    if not role_map:
        print("[INFO] No roles present.")
        return
    name_w = max(len(r) for r in role_map)
    print(f"{'Role'.ljust(name_w)} | Permissions")
    print('-' * (name_w + 40))
    for name, perms in role_map.items():
        print(f"{name.ljust(name_w)} | {', '.join(perms)}")


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Seed permissions, roles and demo users",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""Examples:\n  seed normally: seed_authz.py\n  dry run: seed_authz.py --dry-run\n  show roles: seed_authz.py --show-roles\n""")
    )
    p.add_argument('--show-roles', action='store_true', help='Print role permissions after seeding')
    p.add_argument('--dry-run', action='store_true', help='Rollback after operations (no commit)')
    p.add_argument('--no-users', action='store_true', help='Skip demo user creation')
    p.add_argument('--export-json', nargs='?', const='-', metavar='FILE', help='Export role->permissions JSON (to FILE or stdout if omitted)')
    return p.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    app = create_app()
    with app.app_context():
        session = get_db()
        engine = session.get_bind()
        if not inspect(engine).has_table('permissions'):
            # Auto-create schema for bootstrap; in real env prefer alembic upgrade
            Base.metadata.create_all(engine)
        password = None if args.no_users else os.getenv('SEED_USER_PASSWORD', 'password123')
        try:
            counts = seed_all(session, user_password=password)
            role_map = build_role_permission_map(session)
            if args.dry_run:
                session.rollback()
                print(f"[DRY-RUN] (rolled back) Permissions would create: {counts['permissions']}, "
                      f"Roles would create: {counts['roles']}, Users would create: {counts['users']}")
            else:
                session.commit()
                print(f"[DONE] Permissions created: {counts['permissions']}, Roles created: {counts['roles']}, "
                      f"Users created: {counts['users']}")
            if args.show_roles:
                print('\nRole Permission Summary:')
                print_role_summary(role_map)
            if args.export_json is not None:
                payload = json.dumps({'roles': role_map}, indent=2, sort_keys=True)
                if args.export_json == '-':
                    print(payload)
                else:
                    with open(args.export_json, 'w', encoding='utf-8') as f:
                        f.write(payload)
                    print(f"[INFO] Exported JSON to {args.export_json}")
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

if __name__ == '__main__':
    main()
