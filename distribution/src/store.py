"""
Persistence access for the distribution entities.

An `EntityStore` wraps an active SQLAlchemy session for exactly one ORM
model, exposing the handful of queries the API layer needs. Every method
issues a fresh query, commits its own writes and lets database errors
propagate unchanged to the caller.
"""

from typing import Iterator, Optional
from sqlalchemy import Column
from sqlalchemy.orm import DeclarativeMeta
from sqlalchemy.orm.session import Session


class EntityStore:
    def __init__(self, session: Session, model: DeclarativeMeta, codeColumn: Column):
        self.session = session
        self.model = model
        self.codeColumn = codeColumn

    def findAll(self) -> Iterator:
        """Lazily iterate over every stored entity."""
        yield from self.session.query(self.model).order_by(self.codeColumn.asc())

    def findAllByStatus(self, status: str) -> Iterator:
        """Lazily iterate over the entities currently in the given status."""
        yield from (
            self.session.query(self.model)
            .filter(self.model.status == status)
            .order_by(self.codeColumn.asc())
        )

    def findById(self, id: str) -> Optional[object]:
        return self.session.query(self.model).filter(self.model.id == id).first()

    def findTopByCodeDesc(self) -> Optional[object]:
        """
        Fetch the entity holding the greatest code.

        The comparison is a string comparison on the code column, so once the
        numeric suffix grows past three digits the result is no longer the
        numerically greatest code (PROG999 sorts after PROG1000).
        """
        return self.session.query(self.model).order_by(self.codeColumn.desc()).first()

    def existsByCode(self, code: str) -> bool:
        query = self.session.query(self.model).filter(self.codeColumn == code)
        return bool(self.session.query(query.exists()).scalar())

    def codeOf(self, entity) -> Optional[str]:
        return getattr(entity, self.codeColumn.key)

    def save(self, entity):
        self.session.add(entity)
        self.session.commit()
        self.session.refresh(entity)
        return entity

    def delete(self, entity) -> None:
        self.session.delete(entity)
        self.session.commit()
