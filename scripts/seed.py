# scripts/seed.py
"""
Seed the dashboard database with customers and invoices from a CSV.

Expected columns: customer_id, name, email, amount, status, date
(amount in dollars, date as YYYY-MM-DD). Rows go through the same
validation as the invoice forms.

Usage:
    python -m scripts.seed data/placeholder.csv
"""

import csv
import logging
import sys
from datetime import date

from sqlalchemy.dialects.sqlite import insert as sqlite_insert

from app.config import configure_logging, get_settings
from app.db.engine import get_engine
from app.db.schema import customers, invoices
from app.models.invoices import validate_invoice_form

logger = logging.getLogger(__name__)

FILE_PATH = "data/placeholder.csv"


def parse_seed_csv(file_path: str = FILE_PATH):
    customers_by_id = {}
    invoices_list = []

    n_rows = 0
    n_errors = 0
    error_examples = []

    with open(file_path, newline="") as f:
        reader = csv.DictReader(f)

        for row in reader:
            n_rows += 1

            try:
                customer_id = row["customer_id"].strip()
                if customer_id not in customers_by_id:
                    customers_by_id[customer_id] = {
                        "id": customer_id,
                        "name": row["name"].strip(),
                        "email": row["email"].strip(),
                        "image_url": None,
                    }

                result = validate_invoice_form(
                    {
                        "customerId": customer_id,
                        "amount": row["amount"],
                        "status": row["status"].strip(),
                    }
                )
                if not result.success:
                    raise ValueError(result.errors)

                invoices_list.append(
                    {
                        "customer_id": customer_id,
                        "amount": result.data.amount_in_cents,
                        "status": result.data.status,
                        "date": date.fromisoformat(row["date"].strip()),
                    }
                )

            except (KeyError, AttributeError, ValueError) as e:
                n_errors += 1
                if len(error_examples) < 5:
                    error_examples.append({"row_number": n_rows, "error": repr(e)})

    stats = {
        "n_rows": n_rows,
        "n_customers": len(customers_by_id),
        "n_invoices": len(invoices_list),
        "n_errors": n_errors,
        "error_examples": error_examples,
    }
    return list(customers_by_id.values()), invoices_list, stats


def load_into_db(engine, customers_list, invoices_list):
    with engine.begin() as conn:
        if customers_list:
            stmt = sqlite_insert(customers).on_conflict_do_nothing(
                index_elements=[customers.c.id]
            )
            conn.execute(stmt, customers_list)

        if invoices_list:
            conn.execute(invoices.insert(), invoices_list)


def main(argv=None):
    configure_logging(get_settings())
    args = sys.argv[1:] if argv is None else argv
    file_path = args[0] if args else FILE_PATH

    customers_list, invoices_list, stats = parse_seed_csv(file_path)
    load_into_db(get_engine(), customers_list, invoices_list)

    logger.info("Total CSV rows read:   %s", stats["n_rows"])
    logger.info("Unique customers:      %s", stats["n_customers"])
    logger.info("Invoices loaded:       %s", stats["n_invoices"])
    logger.info("Rows with errors:      %s", stats["n_errors"])

    for ex in stats["error_examples"]:
        logger.warning("Row %s: %s", ex["row_number"], ex["error"])


if __name__ == "__main__":
    main()
