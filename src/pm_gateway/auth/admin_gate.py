"""Administrator check, evaluated on every privileged request.

A user is an administrator when either:
  - their row in the identity store carries role = 'admin', or
  - their email is an exact, case-insensitive member of ADMIN_EMAILS.

Nothing here is cached: the allowlist is parsed from settings per call and
the role is read from the user row loaded for the current request.
"""

from config.settings import settings
from src.pm_common.enums import UserRole
from src.pm_gateway.user.db_models import UserModel


def parse_admin_allowlist(raw: str) -> list[str]:
    """'A@x.com, b@y.com,,' -> ['a@x.com', 'b@y.com']"""
    return [email.strip().lower() for email in raw.split(",") if email.strip()]


def is_admin_email(email: str | None, raw_allowlist: str | None = None) -> bool:
    if not email:
        return False
    allowlist = parse_admin_allowlist(
        settings.ADMIN_EMAILS if raw_allowlist is None else raw_allowlist
    )
    return email.strip().lower() in allowlist


def is_admin(user: UserModel) -> bool:
    return user.role == UserRole.ADMIN.value or is_admin_email(user.email)
