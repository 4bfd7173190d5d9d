from datetime import datetime

import pytest
from sqlalchemy import event

from core.product_service import ProductNotFoundError, ProductValidationError
from core.repositories.stock_movements import MovementKind
from tests import sample_data


@pytest.fixture()
def product(catalog, session):
    return catalog.create_product(sample_data.make_draft(quantity=10), session=session)


def test_record_entrada_increases_stock(movement_service, catalog, session, product, clock):
    result = movement_service.record_movement(product.id, "entrada", 5, reason="Compra", session=session)

    assert (result.previous_quantity, result.new_quantity) == (10, 15)
    assert result.movement_created
    assert result.movement.kind is MovementKind.ENTRADA
    assert result.movement.recorded_by == "ana"
    assert result.movement.occurred_at == clock.now
    assert catalog.get_product(product.id, session=session).quantity == 15


def test_record_saida_decreases_stock(movement_service, catalog, session, product):
    result = movement_service.record_movement(product.id, MovementKind.SAIDA, 10, session=session)

    assert result.new_quantity == 0
    assert catalog.get_product(product.id, session=session).quantity == 0


def test_saida_beyond_stock_is_rejected(movement_service, movement_repository, catalog, session, product):
    with pytest.raises(ProductValidationError) as excinfo:
        movement_service.record_movement(product.id, "saida", 11, session=session)

    assert excinfo.value.fields == ["delta"]
    assert catalog.get_product(product.id, session=session).quantity == 10
    assert list(movement_repository.list_recent(limit=10)) == []


@pytest.mark.parametrize(("kind", "delta", "fields"), [("perda", 1, ["kind"]), ("entrada", 0, ["delta"])])
def test_record_movement_validates_input(movement_service, session, product, kind, delta, fields):
    with pytest.raises(ProductValidationError) as excinfo:
        movement_service.record_movement(product.id, kind, delta, session=session)

    assert excinfo.value.fields == fields


def test_record_movement_unknown_product(movement_service, session):
    with pytest.raises(ProductNotFoundError):
        movement_service.record_movement(404, "entrada", 1, session=session)


def test_record_movement_keeps_explicit_timestamp(movement_service, session, product):
    when = datetime(2026, 7, 3, 14, 0)

    result = movement_service.record_movement(product.id, "entrada", 2, occurred_at=when, session=session)

    assert result.movement.occurred_at == when


def test_adjust_stock_level_records_the_difference(movement_service, catalog, session, product):
    down = movement_service.adjust_stock_level(product.id, 4, session=session)

    assert down.movement.kind is MovementKind.SAIDA
    assert down.movement.delta == 6
    assert down.movement.reason == "Stock adjustment (ana)"
    assert catalog.get_product(product.id, session=session).quantity == 4

    up = movement_service.adjust_stock_level(product.id, 9, session=session)

    assert up.movement.kind is MovementKind.ENTRADA
    assert up.movement.delta == 5
    assert catalog.get_product(product.id, session=session).quantity == 9


def test_adjust_stock_level_to_same_quantity_is_a_noop(movement_service, movement_repository, session, product):
    result = movement_service.adjust_stock_level(product.id, 10, session=session)

    assert not result.movement_created
    assert result.new_quantity == 10
    assert list(movement_repository.list_recent(limit=10)) == []


def test_adjust_stock_level_rejects_negative_target(movement_service, session, product):
    with pytest.raises(ProductValidationError) as excinfo:
        movement_service.adjust_stock_level(product.id, -1, session=session)

    assert excinfo.value.fields == ["target_quantity"]


def test_list_recent_movements_newest_first(movement_service, catalog, session, product):
    other = catalog.create_product(sample_data.make_draft(name="Óleo"), session=session)
    movement_service.record_movement(product.id, "entrada", 1, occurred_at=datetime(2026, 9, 1), session=session)
    movement_service.record_movement(other.id, "entrada", 2, occurred_at=datetime(2026, 10, 1), session=session)
    movement_service.record_movement(product.id, "saida", 3, occurred_at=datetime(2026, 10, 2), session=session)

    recent = movement_service.list_recent_movements(limit=2, session=session)
    assert [movement.delta for movement in recent] == [3, 2]

    for_product = movement_service.list_recent_movements(product_id=product.id, session=session)
    assert [movement.delta for movement in for_product] == [3, 1]


def test_adjust_stock_level_reads_and_writes_under_one_lock(movement_service, sqlite_engine, session, product):
    statements = []

    def _record(conn, clauseelement, multiparams, params, execution_options):
        statements.append((conn, str(clauseelement)))

    event.listen(sqlite_engine, "before_execute", _record)
    try:
        movement_service.adjust_stock_level(product.id, 3, session=session)
    finally:
        event.remove(sqlite_engine, "before_execute", _record)

    reads = [sql for _, sql in statements if "FROM products" in sql]
    assert reads
    assert all("FOR UPDATE" in sql for sql in reads)
    assert any("INSERT INTO stock_movements" in sql for _, sql in statements)
    assert len({id(conn) for conn, _ in statements}) == 1
