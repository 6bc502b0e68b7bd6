#!/usr/bin/env python3
"""
=============================================================================
MEDICALEDU - DEVELOPER COMMANDS
=============================================================================
The single entry point for local operations.

Usage:
    python manage.py init-db                  # Create missing tables
    python manage.py serve [--reload]         # Run the API with uvicorn
    python manage.py create-admin --email ... # Seed an administrator account
    python manage.py doctor                   # Configuration and database check
"""

import argparse
import getpass
import sys

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from medicaledu.core.domain.entities import User
from medicaledu.core.domain.enums import UserRole
from medicaledu.core.domain.exceptions import DomainError
from medicaledu.db.session import db_session, engine, init_db
from medicaledu.shared.config import settings


# Colors for terminal output
class Colors:
    HEADER = '\033[95m'
    GREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'


def log(msg, color=Colors.ENDC):
    print(f"{color}{msg}{Colors.ENDC}")


# --- COMMANDS ---

def cmd_init_db(args):
    log("\nCreating database schema", Colors.HEADER)
    init_db()
    log(f"   Tables ready at {engine.url.render_as_string(hide_password=True)}", Colors.GREEN)
    return 0


def cmd_serve(args):
    import uvicorn

    log(f"\nStarting {settings.APP_NAME} on http://{args.host}:{args.port}", Colors.HEADER)
    uvicorn.run("medicaledu.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def cmd_create_admin(args):
    log("\nCreating administrator", Colors.HEADER)
    password = args.password or getpass.getpass("Password: ")
    init_db()
    try:
        with db_session() as db:
            email = args.email.strip().lower()
            if db.query(User).filter(User.email == email).first() is not None:
                log(f"   A user with email {email} already exists.", Colors.WARNING)
                return 1
            admin = User.create(name=args.name, email=email, password=password, role=UserRole.ADMIN)
            admin.email_confirmed = True
            db.add(admin)
    except DomainError as exc:
        log(f"   {exc.message}", Colors.FAIL)
        return 1
    log(f"   Administrator {email} created.", Colors.GREEN)
    return 0


def cmd_doctor(args):
    """System Diagnostic Tool."""
    log("\nRunning Doctor...", Colors.HEADER)
    log(f"   Environment: {settings.APP_ENV.value}")
    log(f"   Database: {engine.url.render_as_string(hide_password=True)}")

    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        log("   Database reachable.", Colors.GREEN)
    except SQLAlchemyError as exc:
        log(f"   Database unreachable: {exc}", Colors.FAIL)
        return 1

    if settings.OTEL_EXPORTER_OTLP_ENDPOINT:
        log(f"   Tracing exports to {settings.OTEL_EXPORTER_OTLP_ENDPOINT}", Colors.GREEN)
    else:
        log("   Tracing disabled (OTEL_EXPORTER_OTLP_ENDPOINT not set).", Colors.WARNING)

    log("   Doctor complete.", Colors.GREEN)
    return 0


# --- MAIN ---

def build_parser():
    parser = argparse.ArgumentParser(description="MedicalEdu developer commands")
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    init_parser = subparsers.add_parser("init-db", help="Create missing database tables")
    init_parser.set_defaults(func=cmd_init_db)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    serve_parser.set_defaults(func=cmd_serve)

    admin_parser = subparsers.add_parser("create-admin", help="Create an administrator account")
    admin_parser.add_argument("--email", required=True)
    admin_parser.add_argument("--name", default="Administrator")
    admin_parser.add_argument("--password", help="Prompted for when omitted")
    admin_parser.set_defaults(func=cmd_create_admin)

    doctor_parser = subparsers.add_parser("doctor", help="Run diagnostics")
    doctor_parser.set_defaults(func=cmd_doctor)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    # Default to help
    if not args.command:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        log("\nInterrupted.", Colors.WARNING)
        sys.exit(130)
