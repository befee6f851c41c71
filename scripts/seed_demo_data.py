"""
Seed script: Populate a demo tenant with realistic back-office data.

What it creates:
- Customers (~40): mix of companies and private persons, some with contact persons and notes.
- Products (default 60) with prices and stock.
- Quotes (default 120) in draft/sent; part of them converted to orders,
  part of those orders converted to invoices, part of the invoices marked paid.

Run inside the API container to use 'postgres' host and project PYTHONPATH:
    docker compose exec api python scripts/seed_demo_data.py \
        --tenant-id 6f1c2d9e-0000-4000-8000-000000000001 \
        --products 60 --quotes 120

Note: This is intended for development environments only.
"""

# Add project root (/code) to sys.path so `app.*` imports work even if CWD changes
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import argparse
import random
from datetime import date, timedelta
from decimal import Decimal
from uuid import UUID, uuid4

from app.core.exceptions import DomainError
from app.database.database import Base, SessionLocal, engine
from app.modules.customers.schemas import CustomerCreate, ContactPersonCreate
from app.modules.customers.service import CustomerService
from app.modules.documents.conversion import ConversionService
from app.modules.documents.lifecycle import QuoteStatus, InvoiceStatus
from app.modules.documents.schemas import DocumentItemCreate
from app.modules.invoices.schemas import InvoiceUpdate
from app.modules.invoices.service import InvoiceService
from app.modules.notes.schemas import NoteCreate
from app.modules.notes.service import NoteService
from app.modules.products.schemas import ProductCreate
from app.modules.products.service import create_product
from app.modules.quotes.schemas import QuoteCreate, QuoteUpdate
from app.modules.quotes.service import QuoteService

import app.main  # noqa: F401  registra todos los modelos

COMPANIES = ["Bakkerij", "Installatiebedrijf", "Schildersbedrijf", "Adviesbureau", "Transport", "Drukkerij"]
CITIES = ["Amsterdam", "Rotterdam", "Utrecht", "Den Haag", "Eindhoven", "Groningen"]
FIRST_NAMES = ["Anna", "Daan", "Emma", "Lucas", "Sophie", "Noah", "Julia", "Sem"]
LAST_NAMES = ["de Vries", "Jansen", "Bakker", "Visser", "Smit", "Meijer"]
PRODUCTS = ["Consultancy uur", "Onderhoudsbeurt", "Installatie", "Licentie", "Training", "Support contract"]


def pick(seq):
    return random.choice(seq)


def create_customers(db, tenant_id: UUID, count: int = 40):
    service = CustomerService(db)
    notes = NoteService(db)
    customers = []
    for i in range(count):
        if random.random() < 0.6:
            data = CustomerCreate(
                company_name=f"{pick(COMPANIES)} {pick(LAST_NAMES)} {i:02d}",
                email=f"info{i}@example.nl",
                city=pick(CITIES),
                kvk=str(random.randint(10000000, 99999999)),
            )
        else:
            data = CustomerCreate(
                first_name=pick(FIRST_NAMES),
                last_name=pick(LAST_NAMES),
                email=f"klant{i}@example.nl",
                city=pick(CITIES),
            )
        customer = service.create_customer(data, tenant_id)
        if customer.company_name and random.random() < 0.5:
            service.create_contact_person(
                customer.id,
                ContactPersonCreate(first_name=pick(FIRST_NAMES), last_name=pick(LAST_NAMES)),
                tenant_id
            )
        if random.random() < 0.3:
            notes.create_note(
                NoteCreate(customer_id=customer.id, title="Eerste contact", content="Telefonisch gesproken."),
                tenant_id
            )
        customers.append(customer)
    return customers


def create_products(db, tenant_id: UUID, count: int):
    products = []
    for i in range(count):
        data = ProductCreate(
            name=f"{pick(PRODUCTS)} {i:03d}",
            price=Decimal(random.randint(1500, 25000)) / 100,
            stock=random.randint(0, 200),
        )
        products.append(create_product(db, data, tenant_id))
    return products


def create_pipeline(db, tenant_id: UUID, customers, products, quotes_count: int):
    """Cotizaciones → pedidos → facturas con una mezcla de estados"""
    quotes = QuoteService(db)
    invoices = InvoiceService(db)
    conversion = ConversionService(db)
    stats = {"quotes": 0, "orders": 0, "invoices": 0, "paid": 0}

    for i in range(quotes_count):
        items = [
            DocumentItemCreate(product_id=pick(products).id, quantity=random.randint(1, 10))
            for _ in range(random.randint(1, 5))
        ]
        quote_date = date.today() - timedelta(days=random.randint(0, 60))
        data = QuoteCreate(
            customer_id=pick(customers).id,
            quote_number=f"Q-{date.today().year}-{i:04d}",
            quote_date=quote_date,
            valid_until=quote_date + timedelta(days=30),
            discount_percentage=Decimal(pick([0, 0, 5, 10])),
            items=items,
        )
        try:
            quote = quotes.create_document(data, tenant_id)
            stats["quotes"] += 1
            if random.random() < 0.5:
                quote = quotes.update_document(quote.id, QuoteUpdate(status=QuoteStatus.SENT), tenant_id)
            if random.random() < 0.6:
                order = conversion.convert_quote_to_order(quote.id, tenant_id)
                stats["orders"] += 1
                if random.random() < 0.7:
                    invoice = conversion.convert_order_to_invoice(order.id, tenant_id)
                    stats["invoices"] += 1
                    if random.random() < 0.5:
                        invoices.update_document(invoice.id, InvoiceUpdate(status=InvoiceStatus.PAID), tenant_id)
                        stats["paid"] += 1
        except DomainError as e:
            print(f"  Skipped quote {i}: {e.kind} ({e.message})")
            continue
        if stats["quotes"] % 50 == 0:
            print(f"  Quotes created: {stats['quotes']}")
    return stats


def main():
    parser = argparse.ArgumentParser(description="Seed back-office demo data")
    parser.add_argument("--tenant-id", type=UUID, default=None, help="Tenant to seed (default: new random tenant)")
    parser.add_argument("--customers", type=int, default=40)
    parser.add_argument("--products", type=int, default=60)
    parser.add_argument("--quotes", type=int, default=120)
    parser.add_argument("--create-tables", action="store_true", help="Create missing tables first")
    args = parser.parse_args()

    tenant_id = args.tenant_id or uuid4()
    if args.create_tables:
        Base.metadata.create_all(bind=engine)

    db = SessionLocal()
    try:
        print("Creating customers...")
        customers = create_customers(db, tenant_id, args.customers)
        print(f"Customers created: {len(customers)}")

        print("Creating products...")
        products = create_products(db, tenant_id, args.products)
        print(f"Products created: {len(products)}")

        print("Creating quotes, orders and invoices...")
        stats = create_pipeline(db, tenant_id, customers, products, args.quotes)
        print(
            f"Quotes: {stats['quotes']}, orders: {stats['orders']}, "
            f"invoices: {stats['invoices']} ({stats['paid']} paid)"
        )

        print("\nSeed completed.")
        print("Headers for API requests:")
        print(f"  X-Company-ID: {tenant_id}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
