# auth/security.py
import logging
from functools import lru_cache

import jwt
from fastapi.concurrency import run_in_threadpool
from fastapi_users.jwt import decode_jwt, generate_jwt
from fastapi_users.password import PasswordHelper
from pwdlib import PasswordHash
from pwdlib.exceptions import UnknownHashError
from pwdlib.hashers.bcrypt import BcryptHasher
from pydantic import ValidationError

from crm.core.config import Settings
from crm.core.errors import Forbidden
from crm.schemas.user import CurrentUser

log = logging.getLogger(__name__)


@lru_cache
def get_password_helper(rounds: int) -> PasswordHelper:
    return PasswordHelper(PasswordHash((BcryptHasher(rounds=rounds),)))


async def hash_password(password: str, settings: Settings) -> str:
    helper = get_password_helper(settings.bcrypt_rounds)
    return await run_in_threadpool(helper.hash, password)


async def verify_password(password: str, hashed: str, settings: Settings) -> bool:
    helper = get_password_helper(settings.bcrypt_rounds)
    try:
        verified, _ = await run_in_threadpool(helper.verify_and_update, password, hashed)
    except (UnknownHashError, ValueError):
        # unreadable stored hash, or a password bcrypt refuses to process
        log.warning("Password verification could not be performed")
        return False
    return verified


def create_access_token(user: CurrentUser, settings: Settings) -> str:
    data = {
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "aud": settings.jwt_audience,
    }
    return generate_jwt(
        data,
        settings.jwt_secret,
        lifetime_seconds=settings.jwt_lifetime_seconds,
        algorithm=settings.jwt_algorithm,
    )


def decode_access_token(token: str, settings: Settings) -> CurrentUser:
    try:
        claims = decode_jwt(
            token,
            settings.jwt_secret,
            audience=[settings.jwt_audience],
            algorithms=[settings.jwt_algorithm],
        )
        return CurrentUser(id=claims["id"], username=claims["username"], role=claims["role"])
    except (jwt.PyJWTError, KeyError, ValidationError):
        raise Forbidden("Invalid token")
