"""
Dashboard and assistant context tests.

Verifies:
- Dashboard sections are filtered by role capabilities
- Today's sales start at local midnight of the configured timezone
- The assistant context is a plain read-only projection of the catalog
"""

from datetime import datetime
from decimal import Decimal

from clubpos.models import Product, TransactionKind
from clubpos.permissions import Role
from clubpos.services import assistant_service, reporting_service
from clubpos.time_utils import start_of_business_day

NOW = datetime(2024, 6, 15, 14, 0)  # UTC


def _seed(pos, make_member, make_product):
    member = make_member(full_name="Carla Soto")
    make_product(name="Northern Lights", category="FLOWER", stock="20", price_cents=1000)
    make_product(name="Rolling papers", category="ACCESSORY", stock="300", price_cents=150)
    pos.ledger.append(member=member, kind=TransactionKind.DEPOSIT, amount_cents=5000,
                      occurred_at=datetime(2024, 6, 14, 23, 0))
    pos.ledger.append(member=member, kind=TransactionKind.PURCHASE, amount_cents=1200,
                      occurred_at=datetime(2024, 6, 14, 21, 30))
    pos.ledger.append(member=member, kind=TransactionKind.PURCHASE, amount_cents=800,
                      occurred_at=datetime(2024, 6, 15, 9, 0))
    pos.session.commit()
    return member


def test_admin_sees_everything(pos, make_member, make_product):
    _seed(pos, make_member, make_product)

    summary = reporting_service.dashboard_summary(pos, Role.ADMIN, now=NOW)

    assert summary["total_stock"] == 320.0
    assert summary["total_members"] == 1
    assert summary["todays_sales_cents"] == 800
    assert [t["kind"] for t in summary["recent_transactions"]] == ["PURCHASE", "PURCHASE", "DEPOSIT"]
    assert summary["recent_transactions"][0]["signed_amount_cents"] == -800
    assert [p["name"] for p in summary["low_stock"]] == ["Northern Lights"]
    assert summary["low_stock"][0]["unit"] == "g"


def test_sales_role_sees_activity_without_amounts(pos, make_member, make_product):
    _seed(pos, make_member, make_product)

    summary = reporting_service.dashboard_summary(pos, "SALES", now=NOW)

    assert "todays_sales_cents" not in summary
    assert "low_stock" not in summary
    assert summary["total_members"] == 1
    assert all("signed_amount_cents" not in t for t in summary["recent_transactions"])


def test_inventory_role_sees_stock_only(pos, make_member, make_product):
    _seed(pos, make_member, make_product)

    summary = reporting_service.dashboard_summary(pos, Role.INVENTORY, now=NOW)

    assert set(summary) == {"generated_at", "total_stock", "low_stock"}


def test_low_stock_threshold_is_configurable(pos, make_member, make_product):
    _seed(pos, make_member, make_product)
    summary = reporting_service.dashboard_summary(pos, Role.ADMIN, low_stock_threshold=1000, now=NOW)
    assert len(summary["low_stock"]) == 2


def test_recent_transactions_capped_at_five(pos, make_member):
    member = make_member()
    for i in range(8):
        pos.ledger.append(member=member, kind=TransactionKind.DEPOSIT, amount_cents=100 + i)
    pos.session.commit()
    summary = reporting_service.dashboard_summary(pos, Role.ADMIN, now=NOW)
    assert len(summary["recent_transactions"]) == 5


def test_business_day_follows_timezone():
    # 23:30 UTC on the 14th is already the 15th in Madrid (UTC+2 in summer)
    assert start_of_business_day(datetime(2024, 6, 14, 23, 30), "Europe/Madrid") == datetime(2024, 6, 14, 22, 0)
    assert start_of_business_day(datetime(2024, 6, 14, 23, 30), "UTC") == datetime(2024, 6, 14, 0, 0)


def test_todays_sales_in_local_day(pos, make_member, make_product):
    _seed(pos, make_member, make_product)
    # 22:30 UTC on the 14th is past midnight in Madrid, so the 21:30 sale is yesterday there
    late = datetime(2024, 6, 14, 22, 30)
    assert reporting_service.todays_sales_cents(pos, "Europe/Madrid", now=late) == 800
    assert reporting_service.todays_sales_cents(pos, "UTC", now=late) == 2000


def test_describe_product():
    product = Product(
        name="Amnesia", category="FLOWER", strain_type="SATIVA",
        description="Citrus and pine", stock_quantity=Decimal("120"), price_cents=1500,
    )
    assert assistant_service.describe_product(product) == (
        "Amnesia (FLOWER, SATIVA): Citrus and pine. Stock: 120g, Price: €15.00/g"
    )


def test_describe_count_product_without_strain():
    product = Product(
        name="Brownie", category="EDIBLE", description="Chocolate",
        stock_quantity=Decimal("12.500"), price_cents=450,
    )
    assert assistant_service.describe_product(product, "$") == (
        "Brownie (EDIBLE, N/A): Chocolate. Stock: 12.5ud, Price: $4.50/ud"
    )


def test_inventory_context_lists_every_product(pos, make_product):
    make_product(name="A", category="DRINK")
    make_product(name="B", category="EXTRACT", strain_type="HYBRID")
    context = assistant_service.build_inventory_context(pos.catalog.list_products())
    lines = context.splitlines()
    assert len(lines) == 2
    assert lines[0].startswith("A (DRINK, N/A)")
    assert assistant_service.currency_symbol("eur") == "€"
