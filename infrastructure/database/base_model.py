from sqlalchemy.orm import Mapped, mapped_column, DeclarativeBase
from sqlalchemy import MetaData, String, DateTime

from datetime import datetime

from infrastructure.utils.datetime_utils import utc_now
from infrastructure.utils.validation_utils import generate_object_id

# Define naming conventions for database constraints for consistency
convention = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s"
}

metadata_obj = MetaData(naming_convention=convention)


class Base(DeclarativeBase):
    """Base class for SQLAlchemy models using Declarative Mapping with Type Annotation."""
    __abstract__ = True
    metadata = metadata_obj

    # Catalog rows are written once and never updated, so there is no updated_at.
    id: Mapped[str] = mapped_column(String(24), primary_key=True, default=generate_object_id)
    # Set in Python (microsecond precision) rather than server_default: it is the sort key.
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now, nullable=False
    )
