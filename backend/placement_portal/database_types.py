"""
Custom SQLAlchemy column types that behave the same on PostgreSQL and SQLite.
"""
from sqlalchemy import TypeDecorator, CHAR, Text
from sqlalchemy.dialects.postgresql import UUID, JSONB
import uuid
import json


class GUID(TypeDecorator):
    """
    UUID primary/foreign keys.

    Native UUID on PostgreSQL, CHAR(36) text on SQLite. Always hands back
    uuid.UUID objects so comparisons in Python code don't depend on the
    backend.
    """
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(UUID(as_uuid=True))
        return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        if not isinstance(value, uuid.UUID):
            value = uuid.UUID(str(value))
        if dialect.name == 'postgresql':
            return value
        return str(value)

    def process_result_value(self, value, dialect):
        if value is None or isinstance(value, uuid.UUID):
            return value
        return uuid.UUID(value)


class StringList(TypeDecorator):
    """
    Ordered list of strings (skills, job requirements).

    JSONB on PostgreSQL, JSON-encoded TEXT on SQLite. NULL reads back as an
    empty list.
    """
    impl = Text
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(JSONB())
        return dialect.type_descriptor(Text())

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        items = [str(item) for item in value]
        if dialect.name == 'postgresql':
            return items
        return json.dumps(items)

    def process_result_value(self, value, dialect):
        if value is None:
            return []
        if dialect.name == 'postgresql':
            return list(value)
        return json.loads(value)
