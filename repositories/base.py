"""
Base repository interfaces for the data access layer.

Local repositories persist rows in the SQLite store through SQLAlchemy;
remote repositories talk to the ordering API through the HTTP adapter.
"""

from typing import Any, Generic, TypeVar, Optional, List, Type
from sqlalchemy.orm import Session
from abc import ABC

from adapters.http_adapter import HTTPAdapter

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing common CRUD operations on the local store.
    All local repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: Any) -> Optional[ModelType]:
        """Get entity by primary key"""
        return self.db.get(self.model, entity_id)

    def get_all(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        """Get all entities with pagination"""
        return self.db.query(self.model).offset(skip).limit(limit).all()

    def create(self, entity: ModelType) -> ModelType:
        """Create new entity"""
        self.db.add(entity)
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def update(self, entity: ModelType) -> ModelType:
        """Update existing entity"""
        self.db.commit()
        self.db.refresh(entity)
        return entity

    def delete(self, entity_id: Any) -> bool:
        """Delete entity by primary key"""
        entity = self.get_by_id(entity_id)
        if entity:
            self.db.delete(entity)
            self.db.commit()
            return True
        return False

    def exists(self, entity_id: Any) -> bool:
        """Check if entity exists"""
        return self.get_by_id(entity_id) is not None


class ApiRepository(ABC):
    """
    Base for repositories backed by the remote API.
    One method per endpoint; errors propagate as APIError subclasses.
    """

    def __init__(self, api: HTTPAdapter):
        self.api = api
