from typing import Any

from psycopg import sql
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from app.database.connection import get_connection
from app.database.models import BusinessCardRecord
from app.extraction.models import ContactFields
from app.processor.exceptions import CardNotFoundError

_FIELD_COLUMNS = ContactFields.KEYS
_SELECT_COLUMNS = sql.SQL(", ").join(
    sql.Identifier(column)
    for column in (
        "id",
        "user_id",
        "organization_id",
        *_FIELD_COLUMNS,
        "image_url",
        "source",
        "fallback_reason",
        "extracted_data",
        "created_at",
        "updated_at",
    )
)


class BusinessCardRepository:
    """Database operations for the business_cards table."""

    def create(
        self,
        user_id: int,
        organization_id: int | None,
        fields: ContactFields,
        *,
        source: str,
        image_url: str | None = None,
        fallback_reason: str | None = None,
        extracted_data: dict[str, Any] | None = None,
    ) -> BusinessCardRecord:
        """Insert a card and return it as stored."""
        columns = (
            "user_id",
            "organization_id",
            *_FIELD_COLUMNS,
            "image_url",
            "source",
            "fallback_reason",
            "extracted_data",
        )
        values = (
            user_id,
            organization_id,
            *(getattr(fields, column) for column in _FIELD_COLUMNS),
            image_url,
            source,
            fallback_reason,
            Jsonb(extracted_data or {}),
        )
        query = sql.SQL("INSERT INTO business_cards ({}) VALUES ({}) RETURNING {}").format(
            sql.SQL(", ").join(sql.Identifier(column) for column in columns),
            sql.SQL(", ").join(sql.Placeholder() for _ in columns),
            _SELECT_COLUMNS,
        )
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, values)
                row = cur.fetchone()
            conn.commit()

        if row is None:
            raise RuntimeError("INSERT INTO business_cards returned no row")
        return self._to_record(row)

    def find_by_id(self, card_id: int) -> BusinessCardRecord:
        """Find a card by ID.

        Raises:
            CardNotFoundError: if no card with this ID exists.
        """
        query = sql.SQL("SELECT {} FROM business_cards WHERE id = %s").format(_SELECT_COLUMNS)
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, (card_id,))
                row = cur.fetchone()

        if row is None:
            raise CardNotFoundError(f"Card {card_id} not found")
        return self._to_record(row)

    def list_for_user(self, user_id: int) -> list[BusinessCardRecord]:
        """Cards scanned by one user, newest first."""
        return self._list_where("user_id", user_id)

    def list_for_organization(self, organization_id: int) -> list[BusinessCardRecord]:
        """Cards shared within one organization, newest first."""
        return self._list_where("organization_id", organization_id)

    def update_fields(self, card_id: int, fields: ContactFields) -> None:
        """Overwrite the twelve contact fields of a card.

        Raises:
            CardNotFoundError: if no card with this ID exists.
        """
        assignments = sql.SQL(", ").join(
            sql.SQL("{} = %s").format(sql.Identifier(column)) for column in _FIELD_COLUMNS
        )
        query = sql.SQL(
            "UPDATE business_cards SET {}, updated_at = now() WHERE id = %s"
        ).format(assignments)
        values = (*(getattr(fields, column) for column in _FIELD_COLUMNS), card_id)
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, values)
                if cur.rowcount == 0:
                    raise CardNotFoundError(f"Card {card_id} not found")
            conn.commit()

    def delete(self, card_id: int) -> None:
        """Delete a card.

        Raises:
            CardNotFoundError: if no card with this ID exists.
        """
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute("DELETE FROM business_cards WHERE id = %s", (card_id,))
                if cur.rowcount == 0:
                    raise CardNotFoundError(f"Card {card_id} not found")
            conn.commit()

    def _list_where(self, column: str, value: int) -> list[BusinessCardRecord]:
        query = sql.SQL(
            "SELECT {} FROM business_cards WHERE {} = %s ORDER BY created_at DESC, id DESC"
        ).format(_SELECT_COLUMNS, sql.Identifier(column))
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(query, (value,))
                rows = cur.fetchall()
        return [self._to_record(row) for row in rows]

    @staticmethod
    def _to_record(row: dict[str, Any]) -> BusinessCardRecord:
        return BusinessCardRecord(
            id=row["id"],
            user_id=row["user_id"],
            organization_id=row["organization_id"],
            fields=ContactFields.from_mapping(row),
            source=row["source"],
            image_url=row["image_url"],
            fallback_reason=row["fallback_reason"],
            extracted_data=row["extracted_data"] or {},
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )
