# orders/tests/helpers.py

from datetime import date, timedelta
from decimal import Decimal

from parties.models import Counterparty
from products.models import Product, StockBatch


def make_product(name="Paracetamol 500mg"):
    return Product.objects.create(name=name)


def make_batch(product, batch_number, *, stock, unit_cost="6.00", days=180):
    return StockBatch.objects.create(
        product=product,
        batch_number=batch_number,
        expiry_date=date.today() + timedelta(days=days),
        stock=stock,
        unit_cost=Decimal(unit_cost),
    )


def make_customer(name="City Medicos"):
    return Counterparty.objects.create(name=name, role=Counterparty.ROLE_CUSTOMER)


def make_supplier(name="Getz Pharma"):
    return Counterparty.objects.create(name=name, role=Counterparty.ROLE_SUPPLIER)


def line(product, batch_number, units, unit_price, **extra):
    data = {
        "product_id": str(product.id),
        "batch_number": batch_number,
        "units": units,
        "unit_price": str(unit_price),
        "discount": "0",
        "total": str(Decimal(str(unit_price)) * units),
    }
    data.update(extra)
    return data


def sale_payload(counterparty, items, *, invoice="INV-1", paid="0"):
    total = sum((Decimal(i["total"]) for i in items), Decimal("0"))
    return {
        "invoice_number": invoice,
        "counterparty_id": str(counterparty.id),
        "subtotal": str(total),
        "total": str(total),
        "paid_amount": paid,
        "net_value": str(total),
        "items": items,
    }


def stock_of(batch):
    return StockBatch.objects.get(pk=batch.pk).stock


def balance_of(counterparty):
    counterparty.refresh_from_db()
    return counterparty.pay, counterparty.receive
