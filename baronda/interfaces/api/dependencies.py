"""FastAPI dependency utilities."""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from baronda.domain.entities import CallerContext, Recipient
from baronda.infrastructure.database import get_db
from baronda.infrastructure.repositories import RecipientRepository
from baronda.infrastructure.security import decode_access_token

# Tokens are issued by the external identity provider; this URL only feeds the OpenAPI docs.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token")


def _unauthorized(detail: str = "Kredensial tidak valid") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def resolve_current_recipient(token: str, db: Session) -> Recipient:
    """Resolve the recipient identified by the ``sub`` claim of ``token``."""

    try:
        payload = decode_access_token(token)
    except ValueError as exc:
        raise _unauthorized() from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise _unauthorized()

    recipient = RecipientRepository(db).get(subject)
    if recipient is None:
        raise _unauthorized("Pengguna tidak ditemukan")
    return recipient


def get_current_recipient(
    token: str = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> Recipient:
    return resolve_current_recipient(token, db)


def get_current_caller(
    current_recipient: Recipient = Depends(get_current_recipient),
) -> CallerContext:
    """Build the explicit caller context handed to every use case."""

    if not current_recipient.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Pengguna tidak aktif",
        )
    return CallerContext.from_recipient(current_recipient)


def require_staff(caller: CallerContext = Depends(get_current_caller)) -> CallerContext:
    """Ensure the caller is an admin, treasurer or officer."""

    if not caller.is_staff():
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Tidak diizinkan",
        )
    return caller
