"""SQLAlchemy declarative Base shared by the blog models."""

from sqlalchemy import MetaData
from sqlalchemy.orm import DeclarativeBase

# Index and unique-constraint names as they appear in the Alembic migrations.
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
}


class Base(DeclarativeBase):
    """Declarative base for users, categories, posts and their child rows."""

    metadata = MetaData(naming_convention=NAMING_CONVENTION)
