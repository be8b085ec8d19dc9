# HONEYBEE/backend/honeybee/store/record_store.py : access to the hosted tables

"""
Record store client.

Thin, generic CRUD over the SQLAlchemy session: every row leaving this module is
validated into its pydantic record, every database failure becomes
BackendUnavailable. Business rules live in the services, not here.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from pydantic import BaseModel, ValidationError as RowValidationError
from sqlalchemy import inspect
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from honeybee.errors import BackendUnavailable, NotFound
from honeybee.models import models
from honeybee.schemas import schemas

logger = logging.getLogger(__name__)

# table name -> (ORM model, record schema)
TABLES = {
    "companies": (models.Company, schemas.CompanyRecord),
    "employees": (models.Employee, schemas.EmployeeRecord),
    "invoices": (models.Invoice, schemas.InvoiceRecord),
    "invoice_items": (models.InvoiceItem, schemas.InvoiceItemRecord),
    "payments": (models.Payment, schemas.PaymentRecord),
    "products": (models.Product, schemas.ProductRecord),
}


class RecordStore:
    """Row-level CRUD with equality filters, ordering and relation joins"""

    def __init__(self, db: Session):
        self.db = db

    # ========== Reads ==========

    def find(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Union[str, Sequence[str], None] = None,
        join: Optional[Iterable[str]] = None,
        limit: Optional[int] = None,
    ) -> List[BaseModel]:
        model, schema = self._table(table)
        join = list(join or [])
        query = self.db.query(model)

        for column, value in (filters or {}).items():
            query = query.filter(self._column(model, column) == value)

        for relation in join:
            query = query.options(selectinload(self._relation(model, relation)))

        if isinstance(order_by, str):
            order_by = [order_by]
        for key in order_by or []:
            column = self._column(model, key.lstrip("-"))
            query = query.order_by(column.desc() if key.startswith("-") else column.asc())

        if limit:
            query = query.limit(limit)

        try:
            rows = query.all()
            return self._records(rows, schema, join)
        except SQLAlchemyError as e:
            logger.warning(f"find on {table} failed: {e}")
            raise BackendUnavailable() from e

    def find_one(self, table: str, filters: Optional[Dict[str, Any]] = None, **kwargs) -> Optional[BaseModel]:
        rows = self.find(table, filters, limit=1, **kwargs)
        return rows[0] if rows else None

    # ========== Writes ==========

    def insert(self, table: str, row: Dict[str, Any], join: Optional[Iterable[str]] = None) -> BaseModel:
        model, schema = self._table(table)
        obj = self._build(model, row)
        try:
            self.db.add(obj)
            self.db.commit()
            self.db.refresh(obj)
            return self._record(obj, schema, list(join or []))
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"insert into {table} failed: {e}")
            raise BackendUnavailable() from e

    def update(self, table: str, id: str, patch: Dict[str, Any]) -> None:
        model, _ = self._table(table)
        for column in patch:
            self._column(model, column)
        try:
            obj = self.db.get(model, id)
            if obj is None:
                raise NotFound()
            for column, value in patch.items():
                setattr(obj, column, value)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"update on {table} failed: {e}")
            raise BackendUnavailable() from e

    def delete(self, table: str, id: str) -> None:
        model, _ = self._table(table)
        try:
            obj = self.db.get(model, id)
            if obj is None:
                raise NotFound()
            self.db.delete(obj)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.warning(f"delete on {table} failed: {e}")
            raise BackendUnavailable() from e

    # ========== Helpers ==========

    @staticmethod
    def _table(table: str):
        if table not in TABLES:
            raise ValueError(f"Unknown table: {table}")
        return TABLES[table]

    @staticmethod
    def _column(model, name: str):
        columns = inspect(model).columns
        if name not in columns:
            raise ValueError(f"Unknown column {model.__tablename__}.{name}")
        return getattr(model, name)

    @staticmethod
    def _relation(model, name: str):
        if name not in inspect(model).relationships:
            raise ValueError(f"Unknown relation {model.__tablename__}.{name}")
        return getattr(model, name)

    def _build(self, model, row: Dict[str, Any]):
        """Instantiates a model, turning lists under relation keys into child rows"""
        relationships = inspect(model).relationships
        values = {}
        for key, value in row.items():
            if key in relationships:
                child_model = relationships[key].mapper.class_
                values[key] = [child_model(**child) for child in value]
            else:
                self._column(model, key)
                values[key] = value
        return model(**values)

    def _record(self, obj, schema, join: List[str]) -> BaseModel:
        data = {attr.key: getattr(obj, attr.key) for attr in inspect(obj).mapper.column_attrs}
        for relation in join:
            data[relation] = getattr(obj, relation)
        return schema.model_validate(data, from_attributes=True)

    def _records(self, rows, schema, join: List[str]) -> List[BaseModel]:
        records = []
        for obj in rows:
            try:
                records.append(self._record(obj, schema, join))
            except RowValidationError as e:
                logger.warning(f"Skipping malformed {schema.__name__} row: {e}")
        return records
