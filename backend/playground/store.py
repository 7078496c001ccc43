"""
Request store: saved requests, collections and execution history.

``RequestStore`` is the interface the rest of the backend talks to;
``SqlRequestStore`` implements it on a SQLAlchemy session. Every database
failure surfaces as :class:`~playground.exceptions.StoreError`.
"""

import json
from contextlib import contextmanager
from typing import Dict, List, Optional, Protocol, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .exceptions import RequestNotFoundError, StoreError
from .models import CollectionItem, HistoryItem, RequestItem
from .schemas import (
    Collection,
    HistoryEntry,
    HistoryRecord,
    SavedRequest,
    SavedRequestData,
)

UNCATEGORIZED = "uncategorized"


class RequestStore(Protocol):
    def list_collections(self) -> List[Collection]: ...

    def create_collection(self, name: str) -> Collection: ...

    def list_requests_by_collection(
        self, collection_ids: Optional[Sequence[int]] = None
    ) -> Dict[str, List[SavedRequest]]: ...

    def get_request(self, request_id: int) -> SavedRequest: ...

    def save_request(self, data: SavedRequestData) -> SavedRequest: ...

    def update_request(self, request_id: int, data: SavedRequestData) -> None: ...

    def append_history(self, record: HistoryRecord) -> None: ...

    def list_history(self, limit: int = 50) -> List[HistoryEntry]: ...


def _dumps(value) -> str:
    if hasattr(value, "model_dump"):
        value = value.model_dump(mode="json")
    return json.dumps(value)


def _loads(raw: Optional[str], default):
    if not raw:
        return default
    return json.loads(raw)


def _to_saved(item: RequestItem) -> SavedRequest:
    return SavedRequest.model_validate(
        {
            "id": item.id,
            "name": item.name,
            "collection_id": item.collection_id,
            "method": item.method,
            "url": item.url,
            "headers": _loads(item.headers, {}),
            "query_params": _loads(item.query_params, {}),
            "body": _loads(item.body, {}),
            "auth": _loads(item.auth, {"type": "none"}),
        }
    )


def _to_history(item: HistoryItem) -> HistoryEntry:
    return HistoryEntry.model_validate(
        {
            "id": item.id,
            "created_at": item.created_at,
            "method": item.method,
            "url": item.url,
            "headers": _loads(item.headers, {}),
            "query_params": _loads(item.query_params, {}),
            "body": _loads(item.body, {}),
            "auth": _loads(item.auth, {"type": "none"}),
            "response_status": item.status_code,
            "response_time": item.duration_ms,
            "response_size": item.size,
            "response_headers": _loads(item.response_headers, {}),
            "response_body": item.response_body or "",
        }
    )


class SqlRequestStore:
    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def _guard(self, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            raise StoreError(f"Failed to {action}: {exc}", cause=exc) from exc

    def list_collections(self) -> List[Collection]:
        with self._guard("list collections"):
            items = (
                self.db.query(CollectionItem)
                .order_by(CollectionItem.created_at.desc(), CollectionItem.id.desc())
                .all()
            )
        return [Collection(id=c.id, name=c.name, created_at=c.created_at) for c in items]

    def create_collection(self, name: str) -> Collection:
        with self._guard("create collection"):
            item = CollectionItem(name=name)
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
        return Collection(id=item.id, name=item.name, created_at=item.created_at)

    def list_requests_by_collection(
        self, collection_ids: Optional[Sequence[int]] = None
    ) -> Dict[str, List[SavedRequest]]:
        with self._guard("list saved requests"):
            q = self.db.query(RequestItem)
            if collection_ids is not None:
                q = q.filter(RequestItem.collection_id.in_(list(collection_ids)))
            items = q.order_by(RequestItem.created_at.desc(), RequestItem.id.desc()).all()

        grouped: Dict[str, List[SavedRequest]] = {}
        for item in items:
            key = str(item.collection_id) if item.collection_id is not None else UNCATEGORIZED
            grouped.setdefault(key, []).append(_to_saved(item))
        return grouped

    def _get_item(self, request_id: int) -> RequestItem:
        item = self.db.query(RequestItem).filter(RequestItem.id == request_id).first()
        if item is None:
            raise RequestNotFoundError(request_id)
        return item

    def get_request(self, request_id: int) -> SavedRequest:
        with self._guard("load saved request"):
            item = self._get_item(request_id)
        return _to_saved(item)

    def _apply(self, item: RequestItem, data: SavedRequestData) -> None:
        item.name = data.name
        item.collection_id = data.collection_id
        item.method = data.method.value
        item.url = data.url
        item.headers = _dumps(data.headers)
        item.query_params = _dumps(data.query_params)
        item.body = _dumps(data.body)
        item.auth = _dumps(data.auth)

    def save_request(self, data: SavedRequestData) -> SavedRequest:
        with self._guard("save request"):
            item = RequestItem()
            self._apply(item, data)
            self.db.add(item)
            self.db.commit()
            self.db.refresh(item)
        return _to_saved(item)

    def update_request(self, request_id: int, data: SavedRequestData) -> None:
        with self._guard("update request"):
            item = self._get_item(request_id)
            self._apply(item, data)
            self.db.commit()

    def append_history(self, record: HistoryRecord) -> None:
        with self._guard("append history"):
            self.db.add(
                HistoryItem(
                    method=record.method.value,
                    url=record.url,
                    headers=_dumps(record.headers),
                    query_params=_dumps(record.query_params),
                    body=_dumps(record.body),
                    auth=_dumps(record.auth),
                    status_code=record.response_status,
                    duration_ms=record.response_time,
                    size=record.response_size,
                    response_headers=_dumps(record.response_headers),
                    response_body=record.response_body,
                )
            )
            self.db.commit()

    def list_history(self, limit: int = 50) -> List[HistoryEntry]:
        with self._guard("list history"):
            items = (
                self.db.query(HistoryItem)
                .order_by(HistoryItem.id.desc())
                .limit(limit)
                .all()
            )
        return [_to_history(i) for i in items]
