from datetime import UTC, datetime

from sqlalchemy import event


def utcnow() -> datetime:
    """Naive UTC timestamp; all DateTime columns store naive UTC."""
    return datetime.now(UTC).replace(tzinfo=None)


class ImmutableRecordError(RuntimeError):
    """Raised when an append-only record is updated or deleted through the ORM"""


def append_only(model):
    """Class decorator that rejects ORM updates and deletes of a table model."""

    def _reject(mapper, connection, target):
        raise ImmutableRecordError(f"{type(target).__name__} records are append-only")

    event.listen(model, "before_update", _reject)
    event.listen(model, "before_delete", _reject)
    return model
