"""Utility script to register a recipient and mint a development token."""

from __future__ import annotations

import argparse
from datetime import timedelta

from sqlalchemy.exc import SQLAlchemyError

from baronda.domain.entities import RECIPIENT_ROLES, Recipient
from baronda.infrastructure.database import SessionLocal, initialize_database
from baronda.infrastructure.repositories import RecipientRepository
from baronda.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for recipient creation."""

    parser = argparse.ArgumentParser(
        description="Register a recipient in the Baronda notification service.",
    )
    parser.add_argument("recipient_id", help="Identifier issued by the identity provider")
    parser.add_argument("--name", default=None, help="Display name used in salutations")
    parser.add_argument("--email", default=None, help="Contact email (optional)")
    parser.add_argument(
        "--role",
        default="resident",
        choices=sorted(RECIPIENT_ROLES),
        help="Role of the recipient (default: resident)",
    )
    parser.add_argument(
        "--token-hours",
        type=int,
        default=0,
        help="Print a bearer token valid for this many hours (0 disables)",
    )
    return parser.parse_args()


def main() -> None:
    """Create a recipient using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        repository = RecipientRepository(session)
        if repository.get(args.recipient_id) is not None:
            raise SystemExit(f"Penerima {args.recipient_id} sudah terdaftar.")
        recipient = repository.create(
            Recipient(
                id=args.recipient_id,
                display_name=args.name,
                email=args.email,
                role=args.role,
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Gagal menyimpan penerima ke basis data: {exc}") from exc
    finally:
        session.close()

    print(
        "Penerima berhasil dibuat:\n"
        f"  ID: {recipient.id}\n"
        f"  Nama: {recipient.display_name or '-'}\n"
        f"  Peran: {recipient.role}"
    )
    if args.token_hours > 0:
        token = create_access_token(
            {"sub": recipient.id}, expires_delta=timedelta(hours=args.token_hours)
        )
        print(f"  Token: {token}")


if __name__ == "__main__":
    main()
