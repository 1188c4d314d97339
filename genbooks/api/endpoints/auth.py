import logging
from fastapi import APIRouter, Depends, HTTPException, Request, status

from genbooks.api.deps import get_admin_credentials, get_client_ip, get_rate_limiter
from genbooks.core.rate_limit import LoginRateLimiter
from genbooks.core.security import (
    AdminCredentials,
    session_user,
    start_admin_session,
    validate_login_input,
)
from genbooks.schemas.admin import LoginRequest, LoginResponse, LogoutResponse, SessionStatus

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=LoginResponse)
async def login(
    request: Request,
    limiter: LoginRateLimiter = Depends(get_rate_limiter),
    admin: AdminCredentials = Depends(get_admin_credentials),
    client_ip: str = Depends(get_client_ip),
):
    """
    Admin login against the configured credential pair.

    Locked-out addresses get 429 before anything else is checked. Every other
    failure counts towards the lockout and never says which field was wrong.
    """
    if not limiter.is_allowed(client_ip):
        logger.warning(f"Rate limit exceeded for IP: {client_ip}")
        minutes = limiter.retry_after // 60
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail={
                "error": f"Too many login attempts. Please try again in {minutes} minutes.",
                "retryAfter": limiter.retry_after,
            },
        )

    try:
        body = await request.json()
    except ValueError:
        body = None
    if not isinstance(body, dict):
        limiter.record_attempt(client_ip, success=False)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid input", "details": ["Request body must be a JSON object"]},
        )
    credentials_in = LoginRequest(**body)

    errors = validate_login_input(credentials_in.username, credentials_in.password)
    if errors:
        limiter.record_attempt(client_ip, success=False)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid input", "details": errors},
        )

    username = credentials_in.username.strip()
    password = credentials_in.password.strip()

    if not admin.configured:
        logger.error("Admin credentials not configured in environment variables")
        raise HTTPException(status_code=500, detail="Server configuration error")

    if not admin.verify(username, password):
        limiter.record_attempt(client_ip, success=False)
        logger.warning(f"Failed admin login attempt for user: {username} from IP: {client_ip}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Invalid username or password",
                "message": "Please check your credentials and try again",
            },
        )

    user = start_admin_session(request, username)
    limiter.record_attempt(client_ip, success=True)
    logger.info(f"Successful admin login for user: {username} from IP: {client_ip}")
    return LoginResponse(user=user)


@router.post("/logout", response_model=LogoutResponse)
async def logout(request: Request, client_ip: str = Depends(get_client_ip)):
    username = request.session.get("username")
    request.session.clear()
    logger.info(f"Admin logout for user: {username} from IP: {client_ip}")
    return LogoutResponse()


@router.get("/check", response_model=SessionStatus, response_model_exclude_none=True)
async def check_session(request: Request):
    user = session_user(request)
    if user is None:
        return SessionStatus(authenticated=False)
    return SessionStatus(authenticated=True, user=user)
