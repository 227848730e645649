import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crm.auth.dependencies import get_current_user
from crm.core.errors import Conflict, InternalError, NotFound
from crm.crud import customer as customer_crud
from crm.db import get_db
from crm.schemas.common import Message
from crm.schemas.customer import CustomerCreate, CustomerRead, CustomerUpdate
from crm.schemas.user import CurrentUser

log = logging.getLogger(__name__)
router = APIRouter(prefix="/customers", tags=["customers"])


@router.post("", response_model=Message, status_code=201)
async def create_customer(
    payload: CustomerCreate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        customer = await customer_crud.create_customer(db, payload, user.id)
    except IntegrityError:
        await db.rollback()
        raise Conflict("Email already exists")
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Failed to create customer for user %s", user.id)
        raise InternalError()

    log.info("User %s created customer %s", user.id, customer.id)
    return {"message": "Customer created successfully"}


@router.get("", response_model=List[CustomerRead])
async def list_customers(
    search: str = "",
    company: str = "",
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    """All of the caller's customers, newest first, optionally filtered."""
    try:
        return await customer_crud.list_customers(db, user.id, search=search, company=company)
    except SQLAlchemyError:
        log.exception("Failed to list customers for user %s", user.id)
        raise InternalError()


@router.put("/{customer_id}", response_model=Message)
async def update_customer(
    customer_id: int,
    updates: CustomerUpdate,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        updated = await customer_crud.update_customer(db, customer_id, user.id, updates)
    except IntegrityError:
        await db.rollback()
        raise Conflict("Email already exists")
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Failed to update customer %s", customer_id)
        raise InternalError()

    if not updated:
        raise NotFound("Customer not found")
    log.debug("User %s updated customer %s", user.id, customer_id)
    return {"message": "Customer updated successfully"}


@router.delete("/{customer_id}", response_model=Message)
async def delete_customer(
    customer_id: int,
    db: AsyncSession = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    try:
        deleted = await customer_crud.delete_customer(db, customer_id, user.id)
    except SQLAlchemyError:
        await db.rollback()
        log.exception("Failed to delete customer %s", customer_id)
        raise InternalError()

    if not deleted:
        raise NotFound("Customer not found")
    log.info("User %s deleted customer %s", user.id, customer_id)
    return {"message": "Customer deleted successfully"}
