import logging
from contextlib import contextmanager

from sqlalchemy.exc import OperationalError

from errors import NotFoundError, CollaboratorUnavailable
from services.store import RecordStore, ENTITY_NAMES
from task_models import RECORD_TABLES

logger = logging.getLogger(__name__)


def _as_record(row) -> dict:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


def _columns(model) -> set:
    return {column.name for column in model.__table__.columns}


class SqlRecordStore(RecordStore):
    """Record store backed by the SQLAlchemy mirror of the backend tables."""

    def __init__(self, session_factory):
        self.session_factory = session_factory

    @contextmanager
    def _session(self, table: str):
        db = self.session_factory()
        try:
            yield db
        except OperationalError as e:
            db.rollback()
            logger.error("Record store unreachable while accessing %s: %s", table, e)
            raise CollaboratorUnavailable(f"Record store unavailable: {e.orig}") from e
        finally:
            db.close()

    def _model(self, table: str):
        try:
            return RECORD_TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table {table}")

    def _load(self, db, model, table, record_id):
        row = db.query(model).filter(model.Id == int(record_id)).first()
        if row is None:
            raise NotFoundError(ENTITY_NAMES.get(table, table), record_id)
        return row

    async def fetch_records(self, table, where=None):
        model = self._model(table)
        with self._session(table) as db:
            query = db.query(model)
            for field, value in (where or {}).items():
                query = query.filter(getattr(model, field) == value)
            return [_as_record(row) for row in query.order_by(model.Id).all()]

    async def get_record(self, table, record_id):
        model = self._model(table)
        with self._session(table) as db:
            return _as_record(self._load(db, model, table, record_id))

    async def create_record(self, table, record):
        model = self._model(table)
        allowed = _columns(model) - {"Id"}
        with self._session(table) as db:
            row = model(**{k: v for k, v in record.items() if k in allowed})
            db.add(row)
            db.commit()
            db.refresh(row)
            return _as_record(row)

    async def update_record(self, table, record_id, record):
        model = self._model(table)
        allowed = _columns(model) - {"Id"}
        with self._session(table) as db:
            row = self._load(db, model, table, record_id)
            for field, value in record.items():
                if field in allowed:
                    setattr(row, field, value)
            db.commit()
            db.refresh(row)
            return _as_record(row)

    async def delete_record(self, table, record_id):
        model = self._model(table)
        with self._session(table) as db:
            row = self._load(db, model, table, record_id)
            db.delete(row)
            db.commit()
            return True
