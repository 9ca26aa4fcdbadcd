"""Authentication routes.

This module handles HTTP endpoints for registration and login, and provides
the dependencies that authenticate and authorize every other route.
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

import pytz
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from config import (
    ACCESS_TOKEN_EXPIRE_DAYS,
    AUTH_COOKIE_NAME,
    AUTH_COOKIE_SECURE,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
)
from core.dependencies import RegistrationManagerDep, TeamManagerDep, UserManagerDep
from core.exceptions import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    TeamNotFoundError,
    ValidationError,
)
from core.permissions import Capability, Role, authorize, authorize_roles
from schemas.user import LoginRequest, RegisterLeaderRequest, RegisterMemberRequest, User
from utils.converters import team_to_summary, user_to_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

# Bearer header is optional because browsers may authenticate with the cookie
security = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a JWT access token.

    Args:
        data: Data to encode in the token.
        expires_delta: Optional expiration time delta.

    Returns:
        Encoded JWT token string.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(pytz.utc) + expires_delta
    else:
        expire = datetime.now(pytz.utc) + timedelta(days=ACCESS_TOKEN_EXPIRE_DAYS)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)


def issue_token(user: User) -> str:
    return create_access_token({"sub": user.user_id})


def get_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """Read the token from the Authorization header, falling back to the cookie.

    Raises:
        HTTPException: 401 if neither carries a token.
    """
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    token = request.cookies.get(AUTH_COOKIE_NAME)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized to access this route",
        )
    return token


def verify_token(token: str = Depends(get_token)) -> dict:
    """Verify the JWT signature and expiry.

    Args:
        token: Raw JWT string.

    Returns:
        Decoded token payload.

    Raises:
        HTTPException: If token is invalid or expired.
    """
    try:
        payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed",
        )
    if payload.get("sub") is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authorized, token failed",
        )
    return payload


def get_current_user(
    token_payload: dict = Depends(verify_token),
    user_manager: UserManagerDep = None,
) -> User:
    """Get current authenticated user.

    Args:
        token_payload: Decoded JWT token payload.
        user_manager: Injected UserManager instance.

    Returns:
        Current User object (no password hash).

    Raises:
        HTTPException: If user is not found.
    """
    user = user_manager.get_user_by_id(token_payload["sub"])
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user


def require(capability: Capability) -> Callable[..., User]:
    """Build a dependency that admits only roles holding ``capability``.

    Args:
        capability: Capability the route requires.

    Returns:
        Dependency returning the authenticated User.
    """

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        try:
            authorize(current_user.role, capability)
        except PermissionDeniedError as e:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        return current_user

    return dependency


def require_roles(*roles: Role) -> Callable[..., User]:
    """Build a dependency that admits only the listed roles."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        try:
            authorize_roles(current_user.role, roles)
        except PermissionDeniedError as e:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        return current_user

    return dependency


def _set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=AUTH_COOKIE_NAME,
        value=token,
        max_age=ACCESS_TOKEN_EXPIRE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=AUTH_COOKIE_SECURE,
        samesite="lax",
    )


def _team_block(team_manager, team_id: Optional[str]) -> Optional[dict]:
    if not team_id:
        return None
    try:
        return team_to_summary(team_manager.get_team(team_id)).dump()
    except TeamNotFoundError:
        logger.warning("User references missing team %s", team_id)
        return None


@router.post("/register-leader", status_code=status.HTTP_201_CREATED, summary="注册队长并创建队伍")
def register_leader(
    req: RegisterLeaderRequest,
    registration_manager: RegistrationManagerDep = None,
) -> dict:
    """Register a team leader and create their team.

    Args:
        req: Leader profile plus team name and college name.
        registration_manager: Injected RegistrationManager instance.

    Returns:
        Dictionary with token, the team code (shown once) and a user summary.

    Raises:
        HTTPException: 400 on missing fields or duplicates, 500 otherwise.
    """
    if req.missing_required():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide all required fields",
        )
    try:
        user, team = registration_manager.register_leader(req)
    except (ConflictError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Leader registration error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error during registration",
        )

    return {
        "success": True,
        "message": "Team registered successfully",
        "token": issue_token(user),
        "teamCode": team.team_code,
        "user": user_to_summary(user).dump(),
    }


@router.post("/register-member", status_code=status.HTTP_201_CREATED, summary="注册队员并加入队伍")
def register_member(
    req: RegisterMemberRequest,
    registration_manager: RegistrationManagerDep = None,
) -> dict:
    """Register a member onto an existing team via its team code.

    Raises:
        HTTPException: 400 on missing fields, duplicates or a full team,
            404 on an unknown team code, 500 otherwise.
    """
    if req.missing_required():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide all required fields",
        )
    try:
        user, _team = registration_manager.register_member(req)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except (ConflictError, ValidationError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except Exception:
        logger.exception("Member registration error")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server error during registration",
        )

    return {
        "success": True,
        "message": "Joined team successfully",
        "token": issue_token(user),
        "user": user_to_summary(user).dump(),
    }


@router.post("/login", summary="用户登录")
def login(
    req: LoginRequest,
    response: Response,
    user_manager: UserManagerDep = None,
    team_manager: TeamManagerDep = None,
) -> dict:
    """Login with phone and password.

    The token is returned in the body and also set as an http-only cookie.

    Raises:
        HTTPException: 400 on missing fields, 401 on bad credentials.
    """
    if not req.phone or not req.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide phone number and password",
        )

    user = user_manager.authenticate(req.phone, req.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    token = issue_token(user)
    _set_auth_cookie(response, token)
    return {
        "success": True,
        "message": "Login successful",
        "token": token,
        "user": user_to_summary(user, with_contact=True).dump(),
        "team": _team_block(team_manager, user.team_id),
    }


@router.post("/logout", summary="用户登出")
def logout(response: Response) -> dict:
    """Clear the session cookie.

    Bearer tokens are stateless; clients drop them on their side.
    """
    response.delete_cookie(AUTH_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/me", summary="获取当前用户信息")
def get_me(
    current_user: User = Depends(get_current_user),
    team_manager: TeamManagerDep = None,
) -> dict:
    """Get current authenticated user information with their team."""
    return {
        "success": True,
        "user": user_to_summary(current_user, with_contact=True).dump(),
        "team": _team_block(team_manager, current_user.team_id),
    }
