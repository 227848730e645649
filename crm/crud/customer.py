from typing import List

from sqlalchemy import delete, func, or_, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select

from crm.models.base import utcnow
from crm.models.customer import Customer
from crm.schemas.customer import CustomerCreate, CustomerUpdate


async def create_customer(db: AsyncSession, customer: CustomerCreate, user_id: int) -> Customer:
    new_customer = Customer(
        name=customer.name,
        email=customer.email,
        phone=customer.phone,
        company=customer.company,
        user_id=user_id,
    )
    db.add(new_customer)
    await db.commit()
    await db.refresh(new_customer)
    return new_customer


async def list_customers(db: AsyncSession, user_id: int, search: str = "", company: str = "") -> List[Customer]:
    """Owner's customers, newest first.

    ``search`` is a substring of name, email or phone; ``company`` is a
    substring of company and is AND'ed with it. Empty strings match every row,
    including rows without a company.
    """
    query = (
        select(Customer)
        .where(
            Customer.user_id == user_id,
            or_(
                Customer.name.contains(search, autoescape=True),
                Customer.email.contains(search, autoescape=True),
                Customer.phone.contains(search, autoescape=True),
            ),
            func.coalesce(Customer.company, "").contains(company, autoescape=True),
        )
        .order_by(Customer.created_at.desc(), Customer.id.desc())
    )
    result = await db.execute(query)
    return result.scalars().all()


async def update_customer(db: AsyncSession, customer_id: int, user_id: int, updates: CustomerUpdate) -> int:
    """Coalesce-style update of an owned customer. Returns affected row count."""
    update_data = updates.model_dump(exclude_none=True)
    update_data["updated_at"] = utcnow()

    result = await db.execute(
        update(Customer)
        .where(Customer.id == customer_id, Customer.user_id == user_id)
        .values(**update_data)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount


async def delete_customer(db: AsyncSession, customer_id: int, user_id: int) -> int:
    result = await db.execute(
        delete(Customer)
        .where(Customer.id == customer_id, Customer.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    await db.commit()
    return result.rowcount
