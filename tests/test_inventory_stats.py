from datetime import date, datetime
from decimal import Decimal

from core.inventory_stats import StatsAggregator, compute_stats, month_window, window_bounds
from core.repositories.stock_movements import MovementKind, StockMovement
from tests import sample_data


def _movement(kind, delta, occurred_at, product_id=1):
    return StockMovement(
        id=None,
        product_id=product_id,
        kind=kind,
        delta=delta,
        occurred_at=occurred_at,
    )


def test_month_window_wraps_the_year():
    assert month_window(date(2026, 2, 10)) == [
        (2025, 8),
        (2025, 9),
        (2025, 10),
        (2025, 11),
        (2026, 0),
        (2026, 1),
    ]


def test_window_bounds_cover_whole_months():
    assert window_bounds(date(2026, 10, 19)) == (datetime(2026, 5, 1), datetime(2026, 11, 1))
    assert window_bounds(date(2026, 12, 31)) == (datetime(2026, 7, 1), datetime(2027, 1, 1))


def test_monthly_movements_are_zero_filled_and_consecutive():
    snapshot = compute_stats([], [], date(2026, 3, 5))

    assert [entry.month for entry in snapshot.monthly_movements] == [
        "2025-10",
        "2025-11",
        "2025-12",
        "2026-01",
        "2026-02",
        "2026-03",
    ]
    assert snapshot.monthly_movements[0].label == "Oct 2025"
    assert all(entry.entradas == 0 and entry.saidas == 0 for entry in snapshot.monthly_movements)
    assert snapshot.total_products == 0
    assert snapshot.category_breakdown == []
    assert snapshot.low_stock_items == []


def test_monthly_movements_sum_per_kind():
    movements = [
        _movement(MovementKind.ENTRADA, 5, datetime(2026, 9, 2)),
        _movement(MovementKind.ENTRADA, 7, datetime(2026, 9, 30, 23, 59)),
        _movement(MovementKind.SAIDA, 3, datetime(2026, 9, 15)),
        _movement(MovementKind.SAIDA, 4, datetime(2026, 10, 1)),
    ]

    snapshot = compute_stats([], movements, date(2026, 10, 19))
    by_month = {entry.month: entry for entry in snapshot.monthly_movements}

    assert (by_month["2026-09"].entradas, by_month["2026-09"].saidas) == (12, 3)
    assert (by_month["2026-10"].entradas, by_month["2026-10"].saidas) == (0, 4)
    assert by_month["2026-05"].entradas == 0


def test_scenario_low_stock_and_categories():
    products = [
        sample_data.make_product(1, name="A", category="Food", quantity=5, price=Decimal("2.00")),
        sample_data.make_product(2, name="B", category="Food", quantity=12, price=Decimal("1.50")),
        sample_data.make_product(3, name="C", category="Cleaning", quantity=30, price=Decimal("3.00")),
    ]

    snapshot = compute_stats(products, [], date(2026, 10, 19))

    assert snapshot.total_products == 3
    assert snapshot.low_stock_products == 1
    assert [product.name for product in snapshot.low_stock_items] == ["A"]
    assert [(entry.category, entry.count, entry.value) for entry in snapshot.category_breakdown] == [
        ("Food", 2, Decimal("28.00")),
        ("Cleaning", 1, Decimal("90.00")),
    ]
    assert sum(entry.count for entry in snapshot.category_breakdown) == snapshot.total_products


def test_low_stock_items_ordered_by_ratio_then_name():
    products = [
        sample_data.make_product(1, name="Zeta", quantity=2, min_stock=4),
        sample_data.make_product(2, name="Alfa", quantity=1, min_stock=2),
        sample_data.make_product(3, name="Beta", quantity=0, min_stock=10),
        sample_data.make_product(4, name="Gama", quantity=3, min_stock=3),
    ]

    snapshot = compute_stats(products, [], date(2026, 10, 19))

    assert [product.name for product in snapshot.low_stock_items] == ["Beta", "Alfa", "Zeta", "Gama"]


def test_aggregator_reads_catalog_and_ledger(catalog, session, movement_service, catalog_repository, movement_repository):
    created = sample_data.seed_catalog(catalog, session)
    product_a = created[0]
    movement_service.record_movement(
        product_a.id, "entrada", 3, occurred_at=datetime(2026, 8, 10), session=session
    )
    movement_service.record_movement(
        product_a.id, "saida", 2, occurred_at=datetime(2026, 10, 1), session=session
    )
    # Outside the window.
    movement_service.record_movement(
        product_a.id, "entrada", 9, occurred_at=datetime(2026, 4, 30, 23, 0), session=session
    )

    aggregator = StatsAggregator(catalog_repository, movement_repository)
    snapshot = aggregator.compute(date(2026, 10, 19), session=session)
    by_month = {entry.month: entry for entry in snapshot.monthly_movements}

    assert snapshot.total_products == 3
    assert by_month["2026-08"].entradas == 3
    assert by_month["2026-10"].saidas == 2
    assert sum(entry.entradas for entry in snapshot.monthly_movements) == 3


def test_reference_scenario_statuses_and_low_stock():
    products = [
        sample_data.make_product(1, name="A", quantity=5, min_stock=10),
        sample_data.make_product(2, name="B", quantity=14, min_stock=10),
        sample_data.make_product(3, name="C", quantity=20, min_stock=10),
    ]

    snapshot = compute_stats(products, [], date(2026, 10, 19))

    assert [product.status.value for product in products] == ["low", "medium", "good"]
    assert snapshot.low_stock_items == [products[0]]
    assert snapshot.low_stock_products == 1
