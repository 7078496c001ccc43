"""Glue between the executor and the request store.

Store failures are logged here and never change what the caller gets back.
"""

from typing import Optional

from .assembler import pairs_to_mapping
from .exceptions import StoreError
from .logging_setup import get_logger
from .schemas import ApiResponse, HistoryRecord, RequestConfig, SavedRequestData
from .store import RequestStore

logger = get_logger(__name__)


def to_saved_request_data(config: RequestConfig, name: str, collection_id: Optional[int]) -> SavedRequestData:
    return SavedRequestData(
        name=name,
        collection_id=collection_id,
        method=config.method,
        url=config.url,
        headers=pairs_to_mapping(config.headers),
        query_params=pairs_to_mapping(config.query_params),
        body=config.body,
        auth=config.auth,
    )


def to_history_record(config: RequestConfig, response: ApiResponse) -> HistoryRecord:
    return HistoryRecord(
        method=config.method,
        url=config.url,
        headers=pairs_to_mapping(config.headers),
        query_params=pairs_to_mapping(config.query_params),
        body=config.body,
        auth=config.auth,
        response_status=response.status,
        response_time=response.time,
        response_size=response.size,
        response_headers=response.headers,
        response_body=response.body,
    )


def handle_save_request(
    store: RequestStore,
    config: RequestConfig,
    name: str,
    collection_id: Optional[int] = None,
    current_request_id: Optional[int] = None,
) -> Optional[int]:
    """Insert or update a saved request.

    Returns the id that should be treated as the current request from now
    on. If the store fails, the failure is logged and ``current_request_id``
    is returned unchanged.
    """
    data = to_saved_request_data(config, name, collection_id)
    try:
        if current_request_id is not None:
            store.update_request(current_request_id, data)
            return current_request_id
        return store.save_request(data).id
    except StoreError:
        logger.exception("Failed to save request", name=name, request_id=current_request_id)
        return current_request_id


def record_history(store: RequestStore, config: RequestConfig, response: ApiResponse) -> None:
    try:
        store.append_history(to_history_record(config, response))
    except StoreError:
        logger.exception("Failed to record history", url=config.url, status=response.status)
