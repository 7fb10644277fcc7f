"""SQLAlchemy-backed repository for stored calculations."""

from sqlalchemy import text

from margin_rollup.application.ports.calculation_repository import (
    CalculationRepositoryPort,
)
from margin_rollup.application.ports.database import DatabaseEnginePort
from margin_rollup.domain.models.calculation import (
    Calculation,
    GroupAggregate,
    Item,
)
from margin_rollup.domain.models.rows import RollupResult
from margin_rollup.utils.decimal_utils import coerce_decimal


class SqlAlchemyCalculationRepository(CalculationRepositoryPort):
    """Repository reading ``calculations`` with their items and groups.

    Group results are stored in ``calculation_groups`` and rewritten with
    the scalar totals in a single transaction.
    """

    def __init__(self, db_port: DatabaseEnginePort) -> None:
        """Initialize the repository.

        Args:
            db_port: Port providing access to the calculation engine.
        """
        self._db_port = db_port

    def fetch_calculation(self, calculation_id: int) -> Calculation | None:
        """Return the calculation with its items and groups, or None.

        Args:
            calculation_id: Identifier of the calculation.

        Returns:
            Calculation | None: The stored calculation, or None if missing.
        """
        header_query = text(
            """
            SELECT id, date, state_code, user_margin_rate, items_total,
                   global_margin_rate, global_margin_amount,
                   user_margin_amount, net_total, overall_total
            FROM calculations
            WHERE id = :calculation_id
            """
        )
        items_query = text(
            """
            SELECT category_id, price, quantity
            FROM calculation_items
            WHERE calculation_id = :calculation_id
            ORDER BY id
            """
        )
        groups_query = text(
            """
            SELECT cg.group_id, cg.amount, cg.rate, cg.margin_amount,
                   cg.total, g.code
            FROM calculation_groups cg
            LEFT JOIN margin_groups g ON g.id = cg.group_id
            WHERE cg.calculation_id = :calculation_id
            ORDER BY cg.group_id
            """
        )
        params = {"calculation_id": calculation_id}
        engine = self._db_port.get_calculation_engine()
        with engine.connect() as conn:
            header = conn.execute(header_query, params).first()
            if header is None:
                return None
            item_rows = conn.execute(items_query, params).all()
            group_rows = conn.execute(groups_query, params).all()
        items = tuple(
            Item(
                price=coerce_decimal(row.price),
                quantity=coerce_decimal(row.quantity),
                category_id=int(row.category_id),
            )
            for row in item_rows
        )
        groups = tuple(
            GroupAggregate(
                group_id=int(row.group_id),
                amount=coerce_decimal(row.amount),
                rate=coerce_decimal(row.rate),
                margin_amount=coerce_decimal(row.margin_amount),
                total=coerce_decimal(row.total),
                description=row.code or str(row.group_id),
            )
            for row in group_rows
        )
        return Calculation(
            id=int(header.id),
            items=items,
            user_margin_rate=coerce_decimal(header.user_margin_rate),
            groups=groups,
            items_total=coerce_decimal(header.items_total),
            global_margin_rate=coerce_decimal(header.global_margin_rate),
            global_margin_amount=coerce_decimal(header.global_margin_amount),
            user_margin_amount=coerce_decimal(header.user_margin_amount),
            net_total=coerce_decimal(header.net_total),
            overall_total=coerce_decimal(header.overall_total),
            calculation_date=header.date,
            state_code=header.state_code,
        )

    def fetch_calculation_ids(self) -> list[int]:
        """Return the ids of every stored calculation."""
        query = text("SELECT id FROM calculations ORDER BY id")
        engine = self._db_port.get_calculation_engine()
        with engine.connect() as conn:
            rows = conn.execute(query).all()
        return [int(row.id) for row in rows]

    def save_totals(self, calculation_id: int, result: RollupResult) -> None:
        """Write the rollup scalars and group results back.

        Args:
            calculation_id: Identifier of the calculation.
            result: Rollup computed from the calculation's items.
        """
        update_query = text(
            """
            UPDATE calculations
            SET user_margin_rate = :user_margin_rate,
                items_total = :items_total,
                global_margin_rate = :global_margin_rate,
                global_margin_amount = :global_margin_amount,
                user_margin_amount = :user_margin_amount,
                net_total = :net_total,
                overall_total = :overall_total
            WHERE id = :calculation_id
            """
        )
        delete_groups_query = text(
            """
            DELETE FROM calculation_groups
            WHERE calculation_id = :calculation_id
            """
        )
        insert_groups_query = text(
            """
            INSERT INTO calculation_groups (
                calculation_id, group_id, amount, rate, margin_amount, total
            )
            VALUES (
                :calculation_id, :group_id, :amount, :rate, :margin_amount,
                :total
            )
            """
        )
        params = {"calculation_id": calculation_id}
        group_params = [
            {
                **params,
                "group_id": row.group_id,
                "amount": row.amount,
                "rate": row.rate,
                "margin_amount": row.margin_amount,
                "total": row.total,
            }
            for row in result.group_rows
        ]
        engine = self._db_port.get_calculation_engine()
        with engine.begin() as conn:
            conn.execute(
                update_query,
                {
                    **params,
                    "user_margin_rate": result.user_margin_rate,
                    "items_total": result.items_total,
                    "global_margin_rate": result.global_margin_rate,
                    "global_margin_amount": result.global_margin_amount,
                    "user_margin_amount": result.user_margin_amount,
                    "net_total": result.net_total,
                    "overall_total": result.overall_total,
                },
            )
            conn.execute(delete_groups_query, params)
            if group_params:
                conn.execute(insert_groups_query, group_params)


__all__ = ["SqlAlchemyCalculationRepository"]
