# app/api/invoices.py

from typing import List, Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query
from fastapi.responses import JSONResponse
from sqlalchemy import func, or_, select
from sqlalchemy.engine import Engine

from app.actions.invoices import (
    DELETED_MESSAGE,
    create_invoice,
    delete_invoice,
    update_invoice,
)
from app.db.engine import get_engine
from app.db.schema import invoices, customers
from app.models.invoices import (
    InvoiceFormOut,
    InvoiceFormState,
    InvoiceListItem,
    InvoiceListResponse,
    from_cents,
)
from app.navigation import INVOICES_PATH, Navigator, RouteCache, get_navigator, get_route_cache

router = APIRouter(prefix=INVOICES_PATH, tags=["invoices"])


def _form_response(result):
    """Pass redirects through; turn a form state into a JSON error response."""
    if not isinstance(result, InvoiceFormState):
        return result
    status_code = 422 if result.errors else 500
    return JSONResponse(status_code=status_code, content=result.model_dump())


@router.get("", response_model=InvoiceListResponse)
def list_invoices(
    query: str = Query("", description="Matches customer name, email or status"),
    limit: int = Query(6, ge=1, le=100),
    offset: int = Query(0, ge=0),
    engine: Engine = Depends(get_engine),
    cache: RouteCache = Depends(get_route_cache),
) -> InvoiceListResponse:
    """
    Newest invoices first, joined with their customer.

    Served from the route cache until a create/update/delete invalidates it.
    """
    cache_key = f"query={query}&limit={limit}&offset={offset}"
    cached = cache.get(INVOICES_PATH, cache_key)
    if cached is not None:
        return cached

    generation = cache.generation(INVOICES_PATH)

    conditions = []
    if query:
        pattern = f"%{query}%"
        conditions.append(
            or_(
                customers.c.name.ilike(pattern),
                customers.c.email.ilike(pattern),
                invoices.c.status.ilike(pattern),
            )
        )

    with engine.connect() as conn:
        count_stmt = (
            select(func.count())
            .select_from(invoices.join(customers))
            .where(*conditions)
        )
        total = conn.execute(count_stmt).scalar_one()

        stmt = (
            select(
                invoices.c.id,
                invoices.c.customer_id,
                customers.c.name,
                customers.c.email,
                customers.c.image_url,
                invoices.c.amount,
                invoices.c.status,
                invoices.c.date,
            )
            .select_from(invoices.join(customers))
            .where(*conditions)
            .order_by(invoices.c.date.desc(), invoices.c.id)
            .limit(limit)
            .offset(offset)
        )

        rows = conn.execute(stmt).mappings().all()

    items: List[InvoiceListItem] = [InvoiceListItem(**row) for row in rows]
    response = InvoiceListResponse(items=items, total=total, limit=limit, offset=offset)
    cache.set(INVOICES_PATH, cache_key, response, generation=generation)
    return response


@router.get("/{invoice_id}", response_model=InvoiceFormOut)
def get_invoice(invoice_id: str, engine: Engine = Depends(get_engine)) -> InvoiceFormOut:
    """
    Look up a single invoice for the edit form, amount in dollars.
    """
    with engine.connect() as conn:
        stmt = select(
            invoices.c.id,
            invoices.c.customer_id,
            invoices.c.amount,
            invoices.c.status,
            invoices.c.date,
        ).where(invoices.c.id == invoice_id)

        row = conn.execute(stmt).mappings().first()

    if row is None:
        raise HTTPException(status_code=404, detail="Invoice not found")

    return InvoiceFormOut(
        id=row["id"],
        customer_id=row["customer_id"],
        amount=from_cents(row["amount"]),
        status=row["status"],
        date=row["date"],
    )


@router.post("/create")
def submit_create_invoice(
    customerId: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    engine: Engine = Depends(get_engine),
    navigator: Navigator = Depends(get_navigator),
):
    form = {"customerId": customerId, "amount": amount, "status": status}
    return _form_response(create_invoice(engine, form, navigator))


@router.post("/{invoice_id}/edit")
def submit_update_invoice(
    invoice_id: str,
    customerId: Optional[str] = Form(None),
    amount: Optional[str] = Form(None),
    status: Optional[str] = Form(None),
    engine: Engine = Depends(get_engine),
    navigator: Navigator = Depends(get_navigator),
):
    form = {"customerId": customerId, "amount": amount, "status": status}
    return _form_response(update_invoice(engine, invoice_id, form, navigator))


@router.post("/{invoice_id}/delete", response_model=InvoiceFormState)
def submit_delete_invoice(
    invoice_id: str,
    engine: Engine = Depends(get_engine),
    navigator: Navigator = Depends(get_navigator),
):
    state = delete_invoice(engine, invoice_id, navigator)
    if state.message != DELETED_MESSAGE:
        return JSONResponse(status_code=500, content=state.model_dump())
    return state
