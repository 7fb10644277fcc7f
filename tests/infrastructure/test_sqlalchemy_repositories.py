"""Tests for the SQLAlchemy repositories."""

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import MagicMock

from margin_rollup.domain.models import (
    EmptyRow,
    GroupAggregate,
    GroupInfo,
    GroupRow,
    Item,
    MarginBracket,
    MarginOwner,
    MarginRangeTable,
    RollupResult,
)
from margin_rollup.infrastructure.calculation_repository import (
    SqlAlchemyCalculationRepository,
)
from margin_rollup.infrastructure.group_repository import (
    SqlAlchemyGroupRepository,
)
from margin_rollup.infrastructure.margin_repository import (
    SqlAlchemyMarginTableRepository,
)


def _db_port(conn):
    engine = MagicMock()
    engine.connect.return_value.__enter__.return_value = conn
    engine.begin.return_value.__enter__.return_value = conn
    db_port = MagicMock()
    db_port.get_calculation_engine.return_value = engine
    return db_port, engine


def test_find_group_margin_table_maps_rows():
    conn = MagicMock()
    conn.execute.return_value.all.return_value = [
        SimpleNamespace(minimum=0, maximum=100, rate=0.2),
        SimpleNamespace(minimum=100, maximum=1000, rate="0.1"),
    ]
    db_port, _ = _db_port(conn)
    repository = SqlAlchemyMarginTableRepository(db_port)

    table = repository.find_group_margin_table(4)

    assert table.owner == MarginOwner.group(4)
    assert table.brackets == (
        MarginBracket(Decimal("0"), Decimal("100"), Decimal("0.2")),
        MarginBracket(Decimal("100"), Decimal("1000"), Decimal("0.1")),
    )
    query, params = conn.execute.call_args.args
    assert "ORDER BY minimum" in str(query)
    assert params == {"owner_kind": "group", "owner_id": 4}


def test_find_global_margin_table_filters_null_owner():
    conn = MagicMock()
    conn.execute.return_value.all.return_value = []
    db_port, _ = _db_port(conn)
    repository = SqlAlchemyMarginTableRepository(db_port)

    table = repository.find_global_margin_table()

    assert table.is_empty
    query, params = conn.execute.call_args.args
    assert "owner_id IS NULL" in str(query)
    assert params["owner_kind"] == "global"


def test_replace_margin_table_deletes_then_inserts_in_transaction():
    conn = MagicMock()
    db_port, engine = _db_port(conn)
    repository = SqlAlchemyMarginTableRepository(db_port)
    table = MarginRangeTable(
        owner=MarginOwner.group(2),
        brackets=(
            MarginBracket(Decimal("0"), Decimal("10"), Decimal("0.3")),
            MarginBracket(Decimal("10"), Decimal("20"), Decimal("0.2")),
        ),
    )

    count = repository.replace_margin_table(table)

    assert count == 2
    engine.begin.assert_called_once()
    delete_call, insert_call = conn.execute.call_args_list
    assert "DELETE FROM margin_brackets" in str(delete_call.args[0])
    assert "INSERT INTO margin_brackets" in str(insert_call.args[0])
    assert [row["minimum"] for row in insert_call.args[1]] == [
        Decimal("0"),
        Decimal("10"),
    ]


def test_replace_margin_table_with_no_brackets_only_deletes():
    conn = MagicMock()
    db_port, _ = _db_port(conn)
    repository = SqlAlchemyMarginTableRepository(db_port)

    count = repository.replace_margin_table(
        MarginRangeTable(owner=MarginOwner.global_owner())
    )

    assert count == 0
    assert conn.execute.call_count == 1


def test_group_repository_reads_groups_and_owners():
    conn = MagicMock()
    conn.execute.return_value.first.side_effect = [
        SimpleNamespace(id=1, code="Labour"),
        None,
        SimpleNamespace(group_id=3),
        SimpleNamespace(group_id=None),
    ]
    conn.execute.return_value.all.return_value = [
        SimpleNamespace(id=1, code="Labour"),
        SimpleNamespace(id=2, code="Parts"),
    ]
    db_port, _ = _db_port(conn)
    repository = SqlAlchemyGroupRepository(db_port)

    assert repository.find_group(1) == GroupInfo(1, "Labour")
    assert repository.find_group(8) is None
    assert repository.find_category_owner_group(5) == 3
    assert repository.find_category_owner_group(6) is None
    assert repository.fetch_groups() == [
        GroupInfo(1, "Labour"),
        GroupInfo(2, "Parts"),
    ]


def test_fetch_calculation_maps_header_and_items():
    conn = MagicMock()
    header = SimpleNamespace(
        id=7,
        date=date(2026, 1, 5),
        state_code="open",
        user_margin_rate="0.05",
        items_total=1100,
        global_margin_rate="0.1",
        global_margin_amount=110,
        user_margin_amount=0,
        net_total=1210,
        overall_total=1210,
    )
    header_result = MagicMock()
    header_result.first.return_value = header
    items_result = MagicMock()
    items_result.all.return_value = [
        SimpleNamespace(category_id=3, price="100.0", quantity="10.0"),
    ]
    groups_result = MagicMock()
    groups_result.all.return_value = [
        SimpleNamespace(
            group_id=2,
            amount="1000",
            rate="0.1",
            margin_amount="100",
            total="1100",
            code="Labour",
        ),
        SimpleNamespace(
            group_id=5,
            amount=0,
            rate=0,
            margin_amount=0,
            total=0,
            code=None,
        ),
    ]
    conn.execute.side_effect = [header_result, items_result, groups_result]
    db_port, _ = _db_port(conn)
    repository = SqlAlchemyCalculationRepository(db_port)

    calculation = repository.fetch_calculation(7)

    assert calculation.id == 7
    assert calculation.items == (
        Item(Decimal("100.0"), Decimal("10.0"), category_id=3),
    )
    assert calculation.user_margin_rate == Decimal("0.05")
    assert calculation.overall_total == Decimal("1210")
    assert calculation.state_code == "open"
    assert calculation.calculation_date == date(2026, 1, 5)
    assert calculation.groups == (
        GroupAggregate(
            group_id=2,
            amount=Decimal("1000"),
            rate=Decimal("0.1"),
            margin_amount=Decimal("100"),
            total=Decimal("1100"),
            description="Labour",
        ),
        GroupAggregate(
            group_id=5,
            amount=Decimal("0"),
            rate=Decimal("0"),
            margin_amount=Decimal("0"),
            total=Decimal("0"),
            description="5",
        ),
    )
    groups_query, groups_params = conn.execute.call_args_list[2].args
    assert "FROM calculation_groups" in str(groups_query)
    assert groups_params == {"calculation_id": 7}


def test_fetch_calculation_missing_returns_none():
    conn = MagicMock()
    conn.execute.return_value.first.return_value = None
    db_port, _ = _db_port(conn)

    assert SqlAlchemyCalculationRepository(db_port).fetch_calculation(1) is None
    assert conn.execute.call_count == 1


def test_fetch_calculation_ids_and_save_totals():
    conn = MagicMock()
    conn.execute.return_value.all.return_value = [
        SimpleNamespace(id=1),
        SimpleNamespace(id=2),
    ]
    db_port, engine = _db_port(conn)
    repository = SqlAlchemyCalculationRepository(db_port)
    result = RollupResult(
        rows=(EmptyRow(),),
        items_total=Decimal("10"),
        overall_total=Decimal("12"),
    )

    assert repository.fetch_calculation_ids() == [1, 2]
    conn.execute.reset_mock()
    repository.save_totals(2, result)

    engine.begin.assert_called_once()
    update_call, delete_call = conn.execute.call_args_list
    query, params = update_call.args
    assert "UPDATE calculations" in str(query)
    assert params["calculation_id"] == 2
    assert params["items_total"] == Decimal("10")
    assert params["overall_total"] == Decimal("12")
    assert "DELETE FROM calculation_groups" in str(delete_call.args[0])
    assert delete_call.args[1] == {"calculation_id": 2}


def test_save_totals_writes_user_rate_and_replaces_groups():
    conn = MagicMock()
    db_port, engine = _db_port(conn)
    repository = SqlAlchemyCalculationRepository(db_port)
    result = RollupResult(
        rows=(
            GroupRow(
                group_id=3,
                amount=Decimal("100"),
                rate=Decimal("0.2"),
                margin_amount=Decimal("20"),
                total=Decimal("120"),
            ),
            GroupRow(
                group_id=4,
                amount=Decimal("50"),
                rate=Decimal("0.1"),
                margin_amount=Decimal("5"),
                total=Decimal("55"),
            ),
        ),
        items_total=Decimal("175"),
        user_margin_rate=Decimal("0.07"),
        overall_total=Decimal("187.25"),
    )

    repository.save_totals(9, result)

    engine.begin.assert_called_once()
    update_call, delete_call, insert_call = conn.execute.call_args_list
    assert "user_margin_rate = :user_margin_rate" in str(update_call.args[0])
    assert update_call.args[1]["user_margin_rate"] == Decimal("0.07")
    assert "DELETE FROM calculation_groups" in str(delete_call.args[0])
    assert "INSERT INTO calculation_groups" in str(insert_call.args[0])
    assert insert_call.args[1] == [
        {
            "calculation_id": 9,
            "group_id": 3,
            "amount": Decimal("100"),
            "rate": Decimal("0.2"),
            "margin_amount": Decimal("20"),
            "total": Decimal("120"),
        },
        {
            "calculation_id": 9,
            "group_id": 4,
            "amount": Decimal("50"),
            "rate": Decimal("0.1"),
            "margin_amount": Decimal("5"),
            "total": Decimal("55"),
        },
    ]
