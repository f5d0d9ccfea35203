"""
Authentication Routes

POST /register - Register new user
POST /login - Login and get JWT token
"""

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError

from app.core.auth import create_access_token, hash_password, verify_password
from app.core.config import Settings, get_app_settings
from app.core.errors import Conflict, InvalidCredentials
from app.db.postgres import Database, fetch_one, get_db
from app.schemas.schemas import LoginRequest, MessageResponse, RegisterRequest, TokenResponse

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["Authentication"])


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(request: RegisterRequest, db: Database = Depends(get_db)):
    """
    Register a new user account.

    After registration, login to get a token, then create a profile.
    """
    with db.session() as conn:
        if fetch_one(conn, "SELECT user_id FROM users WHERE username = :username", {"username": request.username}):
            raise Conflict("User already exists")

    try:
        with db.session() as conn:
            conn.execute(
                text("INSERT INTO users (username, password, is_registered) VALUES (:username, :password, :registered)"),
                {
                    "username": request.username,
                    "password": hash_password(request.password),
                    "registered": False,
                }
            )
    except IntegrityError:
        # Lost a race with a concurrent registration of the same name
        raise Conflict("User already exists") from None

    logger.info("user registered", username=request.username)
    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
def login(
    request: LoginRequest,
    db: Database = Depends(get_db),
    settings: Settings = Depends(get_app_settings),
):
    """
    Login and receive a signed token.

    Include token in requests: Authorization: Bearer <token>
    """
    with db.session() as conn:
        user = fetch_one(
            conn,
            "SELECT username, password FROM users WHERE username = :username",
            {"username": request.username}
        )

    # Same error for unknown user and wrong password
    if not user or not verify_password(request.password, user["password"]):
        logger.info("login failed", username=request.username)
        raise InvalidCredentials()

    return TokenResponse(token=create_access_token(user["username"], settings))
