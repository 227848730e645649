import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crm.auth.dependencies import get_current_user
from crm.auth.security import create_access_token, hash_password, verify_password
from crm.core.errors import BadRequest, Conflict, InternalError
from crm.crud import user as user_crud
from crm.db import get_db
from crm.schemas.common import Message
from crm.schemas.user import CurrentUser, Token, UserCreate, UserLogin

log = logging.getLogger(__name__)
router = APIRouter(tags=["auth"])

INVALID_CREDENTIALS = "Invalid username or password"


@router.post("/register", response_model=Message, status_code=201)
async def register(request: Request, payload: UserCreate, db: AsyncSession = Depends(get_db)):
    settings = request.app.state.settings
    try:
        hashed = await hash_password(payload.password, settings)
        new_user = await user_crud.create_user(db, payload.username, hashed, payload.role)
    except IntegrityError:
        await db.rollback()
        raise Conflict("Username already exists")
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Failed to register user %r", payload.username)
        raise InternalError()

    log.info("Registered user %s (id=%s, role=%s)", new_user.username, new_user.id, new_user.role)
    return {"message": "User registered successfully"}


@router.post("/login", response_model=Token)
async def login(request: Request, payload: UserLogin, db: AsyncSession = Depends(get_db)):
    settings = request.app.state.settings
    try:
        user = await user_crud.get_user_by_username(db, payload.username)
    except SQLAlchemyError:
        log.exception("Failed to look up user for login")
        raise InternalError()

    # Same answer for unknown user and wrong password
    if not user or not await verify_password(payload.password, user.password, settings):
        log.info("Rejected login attempt")
        raise BadRequest(INVALID_CREDENTIALS)

    identity = CurrentUser(id=user.id, username=user.username, role=user.role)
    return {"token": create_access_token(identity, settings)}


@router.get("/whoami", response_model=CurrentUser)
async def whoami(user: CurrentUser = Depends(get_current_user)):
    return user
