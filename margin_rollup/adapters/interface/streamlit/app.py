"""Streamlit entry point for simulating and inspecting margin rollups."""

from collections.abc import Callable, Sequence
from decimal import Decimal

import streamlit as st
import altair as alt

from margin_rollup.domain.constants import RowType
from margin_rollup.domain.models import (
    AdjustmentQuery,
    GroupInfo,
    RollupResult,
    Row,
)
from margin_rollup.infrastructure.container import (
    build_calculation_repository,
    build_database_adapter,
    build_group_repository,
    build_rollup_use_case,
)
from margin_rollup.infrastructure.logging.logger import get_usage_logger


def _fetch_groups() -> Sequence[GroupInfo]:
    """Fetch the groups offered on the simulate page."""
    return build_group_repository().fetch_groups()


@st.cache_data(show_spinner=False)
def _load_groups() -> Sequence[GroupInfo]:
    """Cached wrapper around _fetch_groups for Streamlit sessions."""
    return _fetch_groups()


def _fetch_calculation_rollup(calculation_id: int) -> RollupResult | None:
    """Compute the rollup of a stored calculation, None when missing."""
    db_adapter = build_database_adapter()
    calculation = build_calculation_repository(db_adapter).fetch_calculation(
        calculation_id
    )
    if calculation is None:
        return None
    return build_rollup_use_case(db_adapter).execute(calculation)


def _run_simulation(payload: dict) -> RollupResult:
    """Run the rollup of a simulate payload."""
    query = AdjustmentQuery.from_payload(payload)
    get_usage_logger().info(
        f"Simulation requested: groups={len(query.groups)}, "
        f"user_margin_rate={query.user_margin_rate}, adjust={query.adjust}"
    )
    return build_rollup_use_case().execute(query)


def _format_currency(value: Decimal, currency_code: str = "EUR") -> str:
    """Format currency values for display."""
    symbol = "€" if currency_code == "EUR" else currency_code
    return f"{value:,.2f} {symbol}"


def _format_rate(rate: Decimal) -> str:
    """Format a fractional rate as a percentage."""
    return f"{rate * Decimal('100'):.2f}%"


def _empty_cells() -> dict[str, str]:
    return {"Line": "", "Amount": "", "Rate": "", "Margin": "", "Total": ""}


def _render_empty(row: Row) -> dict[str, str]:
    return {**_empty_cells(), "Line": "No group"}


def _render_group(row: Row) -> dict[str, str]:
    return {
        "Line": row.description or str(row.group_id),
        "Amount": _format_currency(row.amount),
        "Rate": _format_rate(row.rate),
        "Margin": _format_currency(row.margin_amount),
        "Total": _format_currency(row.total),
    }


def _render_groups_total(row: Row) -> dict[str, str]:
    return {
        **_empty_cells(),
        "Line": "Groups total",
        "Total": _format_currency(row.total),
    }


def _render_global_margin(row: Row) -> dict[str, str]:
    return {
        **_empty_cells(),
        "Line": "Global margin",
        "Rate": _format_rate(row.rate),
        "Margin": _format_currency(row.amount),
    }


def _render_net_total(row: Row) -> dict[str, str]:
    return {
        **_empty_cells(),
        "Line": "Net total",
        "Total": _format_currency(row.total),
    }


def _render_user_margin(row: Row) -> dict[str, str]:
    return {
        **_empty_cells(),
        "Line": "User margin",
        "Rate": _format_rate(row.rate),
        "Margin": _format_currency(row.amount),
    }


def _render_overall_total(row: Row) -> dict[str, str]:
    return {
        **_empty_cells(),
        "Line": "Overall total",
        "Total": _format_currency(row.total),
    }


ROW_RENDERERS: dict[RowType, Callable[[Row], dict[str, str]]] = {
    RowType.EMPTY: _render_empty,
    RowType.GROUP: _render_group,
    RowType.GROUPS_TOTAL: _render_groups_total,
    RowType.GLOBAL_MARGIN: _render_global_margin,
    RowType.NET_TOTAL: _render_net_total,
    RowType.USER_MARGIN: _render_user_margin,
    RowType.OVERALL_TOTAL: _render_overall_total,
}


def _rows_to_table(rows: Sequence[Row]) -> list[dict[str, str]]:
    """Render every row through its type's renderer."""
    return [ROW_RENDERERS[row.row_type](row) for row in rows]


def _prepare_group_chart_data(
    result: RollupResult,
) -> list[dict[str, str | float]]:
    """Prepare Altair-ready data of group amounts and margins.

    Args:
        result: Rollup whose group rows are charted.

    Returns:
        One entry per group and part (amount or margin).
    """
    data: list[dict[str, str | float]] = []
    for row in result.group_rows:
        label = row.description or str(row.group_id)
        data.append(
            {"group": label, "part": "Amount", "value": float(row.amount)}
        )
        data.append(
            {
                "group": label,
                "part": "Margin",
                "value": float(row.margin_amount),
            }
        )
    return data


def _render_group_chart(result: RollupResult) -> None:
    """Render a stacked bar chart of group amounts and margins."""
    data = _prepare_group_chart_data(result)
    if not data:
        return
    chart = alt.Chart(alt.Data(values=data)).mark_bar().encode(
        x=alt.X("group:N", title=None, sort=None),
        y=alt.Y("value:Q", title="Total"),
        color=alt.Color(
            "part:N",
            scale=alt.Scale(range=["#457b9d", "#f4a261"]),
            legend=alt.Legend(orient="bottom", title=None),
        ),
        tooltip=[
            alt.Tooltip("group:N"),
            alt.Tooltip("part:N"),
            alt.Tooltip("value:Q", format=",.2f"),
        ],
    )
    st.subheader("Totals by group")
    st.altair_chart(chart, width="stretch")


def _render_result(result: RollupResult) -> None:
    """Render the rows, margin check and chart of a rollup."""
    st.dataframe(_rows_to_table(result.rows), width="stretch", hide_index=True)
    if result.is_empty:
        return
    if result.overall_below:
        st.warning(
            f"Overall margin {_format_rate(result.overall_margin)} is below "
            f"the minimum {_format_rate(result.min_margin)}."
        )
    if result.unresolved_groups or result.global_unresolved:
        st.caption("Some amounts had no margin bracket; their rate is 0.")
    _render_group_chart(result)


def _render_simulate_page() -> None:
    """Render the simulate form and its rollup."""
    groups = _load_groups()
    if not groups:
        st.warning("No groups found.")
        return

    st.subheader("Group amounts")
    group_payload = []
    for group in groups:
        amount = st.number_input(
            group.code,
            min_value=0.0,
            value=0.0,
            step=100.0,
            key=f"group_{group.id}",
        )
        group_payload.append({"id": group.id, "total": str(amount)})
    user_margin_percent = st.number_input("User margin (%)", value=0.0)
    adjust = st.checkbox("Adjust to the minimum margin", value=False)

    payload = {
        "adjust": adjust,
        "user_margin_rate": str(
            Decimal(str(user_margin_percent)) / Decimal("100")
        ),
        "groups": group_payload,
    }
    _render_result(_run_simulation(payload))


def _render_calculation_page() -> None:
    """Render the rollup of a stored calculation."""
    calculation_id = st.number_input("Calculation id", min_value=1, step=1)
    result = _fetch_calculation_rollup(int(calculation_id))
    if result is None:
        st.warning(f"Calculation {int(calculation_id)} not found.")
        return
    _render_result(result)


def main() -> None:
    """Render the Streamlit app."""
    st.set_page_config(page_title="Margin Rollup", layout="wide")
    st.title("Margin Rollup")

    page = st.sidebar.selectbox("Page", ["Simulate", "Calculation"])
    get_usage_logger().info(f"Page viewed: {page}")

    try:
        if page == "Simulate":
            _render_simulate_page()
        else:
            _render_calculation_page()
    except RuntimeError as exc:
        st.error(str(exc))


if __name__ == "__main__":  # pragma: no cover
    main()
