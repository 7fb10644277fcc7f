"""Tests for RunRollupUseCase."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from margin_rollup.application.use_cases.run_rollup import RunRollupUseCase
from margin_rollup.domain.constants import RowType
from margin_rollup.domain.models import (
    AdjustmentQuery,
    Calculation,
    EmptyRow,
    GroupInfo,
    Item,
    MarginBracket,
    MarginOwner,
    MarginRangeTable,
    QueryGroup,
)


class _FakeMarginRepository:
    def __init__(self, group_rates=None, global_rate="0.1"):
        self._group_rates = group_rates or {}
        self._global_rate = global_rate
        self.requested_groups: list[int] = []

    def find_group_margin_table(self, group_id):
        self.requested_groups.append(group_id)
        owner = MarginOwner.group(group_id)
        rate = self._group_rates.get(group_id)
        if rate is None:
            return MarginRangeTable(owner=owner)
        return MarginRangeTable(
            owner=owner,
            brackets=(MarginBracket.create("0", "1000000", rate),),
        )

    def find_global_margin_table(self):
        owner = MarginOwner.global_owner()
        if self._global_rate is None:
            return MarginRangeTable(owner=owner)
        return MarginRangeTable(
            owner=owner,
            brackets=(MarginBracket.create("0", "1000000", self._global_rate),),
        )

    def replace_margin_table(self, table):
        return len(table)


class _FakeGroupRepository:
    def __init__(self, groups, category_groups=None):
        self._groups = {group.id: group for group in groups}
        self._category_groups = category_groups or {}

    def find_group(self, group_id):
        return self._groups.get(group_id)

    def find_category_owner_group(self, category_id):
        return self._category_groups.get(category_id)

    def fetch_groups(self):
        return sorted(self._groups.values(), key=lambda group: group.id)


def _use_case(margin_repo, group_repo, logger=None):
    return RunRollupUseCase(
        margin_repository=margin_repo,
        group_repository=group_repo,
        logger=logger or MagicMock(),
    )


def test_execute_calculation_aggregates_items_into_groups():
    """A stored calculation is aggregated then rolled up."""
    calculation = Calculation(
        id=1,
        items=(
            Item(Decimal("100.0"), Decimal("10.0"), category_id=11),
        ),
    )
    use_case = _use_case(
        _FakeMarginRepository({1: "0.1"}),
        _FakeGroupRepository([GroupInfo(1, "G")], {11: 1}),
    )

    result = use_case.execute(calculation)

    group = result.group_rows[0]
    assert group.description == "G"
    assert group.total == Decimal("1100")
    assert result.global_margin_amount == Decimal("110")
    assert result.net_total == Decimal("1210")
    assert result.overall_total == Decimal("1210")


def test_execute_calculation_without_items_returns_empty_row():
    margin_repo = _FakeMarginRepository()
    use_case = _use_case(margin_repo, _FakeGroupRepository([]))

    result = use_case.execute(Calculation(id=5))

    assert result.rows == (EmptyRow(),)
    assert result.overall_total == 0
    assert margin_repo.requested_groups == []


def test_execute_calculation_logs_orphan_categories():
    logger = MagicMock()
    calculation = Calculation(
        id=1,
        items=(
            Item(Decimal("10"), Decimal("1"), category_id=1),
            Item(Decimal("10"), Decimal("1"), category_id=2),
        ),
    )
    use_case = _use_case(
        _FakeMarginRepository({1: "0"}),
        _FakeGroupRepository([GroupInfo(1, "G")], {1: 1}),
        logger=logger,
    )

    result = use_case.execute(calculation)

    assert result.items_total == Decimal("10")
    warnings = [call.args[0] for call in logger.warning.call_args_list]
    assert any("Category 2" in message for message in warnings)


def test_execute_query_uses_submitted_group_amounts():
    query = AdjustmentQuery(
        user_margin_rate=Decimal("0.05"),
        groups=(QueryGroup(id=1, total=Decimal("100.0")),),
    )
    use_case = _use_case(
        _FakeMarginRepository({1: "0.02"}, global_rate="0"),
        _FakeGroupRepository([GroupInfo(1, "G")]),
    )

    result = use_case.execute(query)

    assert result.group_rows[0].total == Decimal("102")
    assert result.user_margin_amount == Decimal("5.10")
    assert result.overall_total == Decimal("107.10")


def test_execute_query_drops_unknown_group():
    logger = MagicMock()
    query = AdjustmentQuery(groups=(QueryGroup(id=99, total=Decimal("5")),))
    use_case = _use_case(
        _FakeMarginRepository(),
        _FakeGroupRepository([GroupInfo(1, "G")]),
        logger=logger,
    )

    result = use_case.execute(query)

    assert result.is_empty
    logger.warning.assert_called_once()


def test_execute_query_skips_zero_totals_and_merges_duplicates():
    query = AdjustmentQuery(
        groups=(
            QueryGroup(id=2, total=Decimal("10")),
            QueryGroup(id=1, total=Decimal("0")),
            QueryGroup(id=2, total=Decimal("5")),
        )
    )
    use_case = _use_case(
        _FakeMarginRepository({2: "0"}, global_rate="0"),
        _FakeGroupRepository([GroupInfo(1, "A"), GroupInfo(2, "B")]),
    )

    result = use_case.execute(query)

    assert [row.group_id for row in result.group_rows] == [2]
    assert result.group_rows[0].amount == Decimal("15")


def test_both_sources_produce_the_same_rows():
    """A calculation and a query with the same amounts match."""
    margin_repo = _FakeMarginRepository({1: "0.1", 2: "0.2"})
    group_repo = _FakeGroupRepository(
        [GroupInfo(1, "A"), GroupInfo(2, "B")],
        {10: 1, 20: 2},
    )
    use_case = _use_case(margin_repo, group_repo)
    calculation = Calculation(
        id=1,
        user_margin_rate=Decimal("0.03"),
        items=(
            Item(Decimal("50"), Decimal("2"), category_id=20),
            Item(Decimal("10"), Decimal("3"), category_id=10),
        ),
    )
    query = AdjustmentQuery(
        user_margin_rate=Decimal("0.03"),
        groups=(
            QueryGroup(id=2, total=Decimal("100")),
            QueryGroup(id=1, total=Decimal("30")),
        ),
    )

    assert use_case.execute(calculation).rows == use_case.execute(query).rows


def test_execute_query_adjust_raises_user_margin():
    logger = MagicMock()
    query = AdjustmentQuery(
        adjust=True,
        groups=(QueryGroup(id=1, total=Decimal("1000")),),
    )
    use_case = _use_case(
        _FakeMarginRepository({1: "0"}, global_rate="0"),
        _FakeGroupRepository([GroupInfo(1, "A")]),
        logger=logger,
    )

    result = use_case.execute(query)

    assert result.user_margin_rate == Decimal("0.10")
    assert result.overall_total == Decimal("1100")
    infos = [call.args[0] for call in logger.info.call_args_list]
    assert any("adjusted" in message for message in infos)


def test_execute_logs_unresolved_brackets():
    logger = MagicMock()
    query = AdjustmentQuery(groups=(QueryGroup(id=1, total=Decimal("10")),))
    use_case = _use_case(
        _FakeMarginRepository({}, global_rate=None),
        _FakeGroupRepository([GroupInfo(1, "A")]),
        logger=logger,
    )

    result = use_case.execute(query)

    assert result.rows[0].rate == 0
    assert result.rows[-4].row_type is RowType.GLOBAL_MARGIN
    assert result.global_unresolved is True
    assert logger.warning.call_count == 2


def test_execute_rejects_unknown_source():
    use_case = _use_case(_FakeMarginRepository(), _FakeGroupRepository([]))

    with pytest.raises(TypeError):
        use_case.execute({"groups": []})
