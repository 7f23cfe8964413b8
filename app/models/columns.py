# app/models/columns.py

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def utc_column(nullable: bool = False, index: bool = False) -> Column:
    # timestamps are stored timezone-aware (timestamptz on Postgres)
    return Column(DateTime(timezone=True), nullable=nullable, index=index)
