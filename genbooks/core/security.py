import re
import logging
from dataclasses import dataclass
from typing import Any, List, Optional

import bcrypt
from fastapi import HTTPException, Request, status

from genbooks.core.config import Settings
from genbooks.core.helpers import ct_equal, now_iso

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_-]+$")

# bcrypt only looks at the first 72 bytes; newer releases refuse longer input
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str, rounds: int = 12) -> str:
    return bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Configured admin password hash is not a valid bcrypt hash")
        return False


@dataclass
class AdminCredentials:
    username: Optional[str]
    password_hash: Optional[str]

    @classmethod
    def from_settings(cls, settings: Settings) -> "AdminCredentials":
        """
        Prefer ADMIN_PASSWORD_HASH. A plain ADMIN_PASSWORD is hashed once here so
        the login path only ever compares against a salted hash.
        """
        password_hash = settings.ADMIN_PASSWORD_HASH
        if not password_hash and settings.ADMIN_PASSWORD:
            password_hash = hash_password(settings.ADMIN_PASSWORD)
        return cls(username=settings.ADMIN_USERNAME, password_hash=password_hash)

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password_hash)

    def verify(self, username: str, password: str) -> bool:
        if not self.configured:
            return False
        # evaluate both so a wrong username costs the same as a wrong password
        ok_user = ct_equal(username, self.username)
        ok_pass = verify_password(password, self.password_hash)
        return ok_user and ok_pass


def validate_login_input(username: Any, password: Any) -> List[str]:
    errors = []

    if not username or not isinstance(username, str):
        errors.append("Username is required and must be a string")
    elif len(username) < 3 or len(username) > 50:
        errors.append("Username must be between 3 and 50 characters")
    elif not USERNAME_PATTERN.match(username):
        errors.append("Username can only contain letters, numbers, underscores, and hyphens")

    if not password or not isinstance(password, str):
        errors.append("Password is required and must be a string")
    elif len(password) < 6 or len(password) > 100:
        errors.append("Password must be between 6 and 100 characters")

    return errors


# Session helpers

def start_admin_session(request: Request, username: str) -> dict:
    request.session.clear()
    request.session["is_admin"] = True
    request.session["username"] = username
    request.session["login_time"] = now_iso()
    return session_user(request)


def session_user(request: Request) -> Optional[dict]:
    session = request.session
    if not session.get("is_admin"):
        return None
    return {"username": session.get("username"), "loginTime": session.get("login_time")}


def is_admin(request: Request) -> bool:
    return bool(request.session.get("is_admin"))


def require_admin(request: Request) -> dict:
    if not is_admin(request):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return session_user(request)
