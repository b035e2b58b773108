# app/actions/invoices.py
"""
Form actions for the dashboard invoice pages.

Each action validates the submitted fields, writes to the invoices table,
then invalidates the cached invoice list and redirects back to it. Failures
come back as an InvoiceFormState for the form to display; storage errors are
logged here and only a generic message leaves the action.
"""

import logging
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

from sqlalchemy import delete, insert, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from zoneinfo import ZoneInfo

from app.config import get_settings
from app.db.schema import invoices
from app.models.invoices import InvoiceFormState, validate_invoice_form
from app.navigation import INVOICES_PATH, Navigator

logger = logging.getLogger(__name__)

ActionResult = Union[InvoiceFormState, Any]

DELETED_MESSAGE = "Deleted Invoice."


def submission_day() -> date:
    return datetime.now(ZoneInfo(get_settings().TIMEZONE)).date()


def create_invoice(
    engine: Engine,
    form: Mapping[str, Any],
    navigator: Navigator,
    today: Optional[date] = None,
) -> ActionResult:
    result = validate_invoice_form(form)
    if not result.success:
        return InvoiceFormState(
            errors=result.errors,
            message="Missing Fields. Failed to Create Invoice.",
        )

    fields = result.data
    invoice_date = today or submission_day()

    try:
        with engine.begin() as conn:
            conn.execute(
                insert(invoices).values(
                    customer_id=fields.customer_id,
                    amount=fields.amount_in_cents,
                    status=fields.status,
                    date=invoice_date,
                )
            )
    except SQLAlchemyError:
        logger.exception("Failed to create invoice for customer %s", fields.customer_id)
        return InvoiceFormState(message="Database Error: Failed to Create Invoice.")

    logger.info(
        "Created invoice for customer %s: %s cents, %s",
        fields.customer_id,
        fields.amount_in_cents,
        fields.status,
    )
    navigator.invalidate(INVOICES_PATH)
    return navigator.redirect(INVOICES_PATH)


def update_invoice(
    engine: Engine,
    invoice_id: str,
    form: Mapping[str, Any],
    navigator: Navigator,
) -> ActionResult:
    result = validate_invoice_form(form)
    if not result.success:
        return InvoiceFormState(
            errors=result.errors,
            message="Missing Fields. Failed to Update Invoice.",
        )

    fields = result.data

    # id and date are fixed at creation; only these three columns change
    stmt = (
        update(invoices)
        .where(invoices.c.id == invoice_id)
        .values(
            customer_id=fields.customer_id,
            amount=fields.amount_in_cents,
            status=fields.status,
        )
    )

    try:
        with engine.begin() as conn:
            rowcount = conn.execute(stmt).rowcount
    except SQLAlchemyError:
        logger.exception("Failed to update invoice %s", invoice_id)
        return InvoiceFormState(message="Database Error: Failed to Update Invoice.")

    if rowcount == 0:
        logger.info("Update matched no invoice with id %s", invoice_id)
    else:
        logger.info("Updated invoice %s", invoice_id)

    navigator.invalidate(INVOICES_PATH)
    return navigator.redirect(INVOICES_PATH)


def delete_invoice(
    engine: Engine,
    invoice_id: str,
    navigator: Navigator,
) -> InvoiceFormState:
    try:
        with engine.begin() as conn:
            rowcount = conn.execute(
                delete(invoices).where(invoices.c.id == invoice_id)
            ).rowcount
    except SQLAlchemyError:
        logger.exception("Failed to delete invoice %s", invoice_id)
        return InvoiceFormState(message="Database Error: Failed to Delete Invoice.")

    logger.info("Deleted invoice %s (%s rows)", invoice_id, rowcount)
    navigator.invalidate(INVOICES_PATH)
    return InvoiceFormState(message=DELETED_MESSAGE)
