"""
Dictionary conversion for SQLAlchemy models.

Models store snake_case columns while the API speaks camelCase (assetTag,
knoxId, assignedSeats). ``to_dict(camel_case=True)`` produces the wire shape
and ``to_snake`` maps incoming keys back to column names.
"""

from datetime import date
from sqlalchemy import inspect
from asset_tracker import db
from asset_tracker.logger import get_logger

logger = get_logger("asset_tracker.buisness.core.data_insertion")

AUDIT_FIELDS = ('created_at', 'updated_at', 'created_by_id', 'updated_by_id')


def to_camel(key):
    """Convert a snake_case column name to its camelCase API key"""
    head, *rest = key.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def to_snake(key):
    """Convert a camelCase API key back to its column name"""
    return ''.join(f'_{char.lower()}' if char.isupper() else char for char in key)


class DataInsertionMixin:
    """
    Adds dictionary construction and serialization to a model:

    - from_dict(): build an unsaved instance from known columns
    - to_dict(): column values, dates as ISO strings
    - find_or_create_from_dict(): idempotent seeding of fixed rows
    """

    @classmethod
    def column_names(cls):
        return [column.key for column in inspect(cls).columns]

    @classmethod
    def from_dict(cls, data, acting_user_id=None):
        """
        Build an instance from the column keys of ``data``; other keys are ignored.

        When ``acting_user_id`` is given it is stamped on the audit columns
        the model has.
        """
        columns = set(cls.column_names())
        instance = cls(**{key: value for key, value in data.items() if key in columns})

        if acting_user_id is not None:
            for audit_column in ('created_by_id', 'updated_by_id'):
                if audit_column in columns:
                    setattr(instance, audit_column, acting_user_id)
        return instance

    def to_dict(self, include_audit_fields=True, camel_case=False):
        """
        Args:
            include_audit_fields: Include created/updated stamps
            camel_case: Emit API keys instead of column names
        """
        result = {}
        for column in self.column_names():
            if not include_audit_fields and column in AUDIT_FIELDS:
                continue
            value = getattr(self, column)
            # Covers datetime, a date subclass
            if isinstance(value, date):
                value = value.isoformat()
            result[to_camel(column) if camel_case else column] = value
        return result

    @classmethod
    def find_or_create_from_dict(cls, data, lookup_fields, acting_user_id=None):
        """
        Return the row matching ``data`` on ``lookup_fields``, creating and
        committing it when absent.

        Returns:
            tuple: (instance, created)
        """
        existing = cls.query.filter_by(**{field: data[field] for field in lookup_fields}).first()
        if existing is not None:
            return existing, False

        instance = cls.from_dict(data, acting_user_id)
        db.session.add(instance)
        try:
            db.session.commit()
        except Exception:
            db.session.rollback()
            logger.error(f"Error creating {cls.__name__} from {lookup_fields}", exc_info=True)
            raise
        logger.info(f"Created {cls.__name__}: {instance}")
        return instance, True
