# app/api/customers.py

from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.engine import Engine

from app.db.engine import get_engine
from app.db.schema import customers
from app.models.customers import CustomerField, CustomerOut

router = APIRouter(prefix="/customers", tags=["customers"])


@router.get("/", response_model=List[CustomerField])
def list_customers(engine: Engine = Depends(get_engine)) -> List[CustomerField]:
    """
    Customers for the invoice form's customer select, ordered by name.
    """
    with engine.connect() as conn:
        stmt = select(customers.c.id, customers.c.name).order_by(customers.c.name)
        rows = conn.execute(stmt).mappings().all()

    return [CustomerField(id=row["id"], name=row["name"]) for row in rows]


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: str, engine: Engine = Depends(get_engine)) -> CustomerOut:
    """
    Return a single customer by ID.
    """
    with engine.connect() as conn:
        stmt = (
            select(
                customers.c.id,
                customers.c.name,
                customers.c.email,
                customers.c.image_url,
            )
            .where(customers.c.id == customer_id)
        )

        row = conn.execute(stmt).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Customer not found")

    return CustomerOut(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        image_url=row["image_url"],
    )
