from typing import List, Optional

import httpx
from fastapi import BackgroundTasks, Depends, FastAPI, HTTPException, Query, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from . import __version__, state
from .classifier import describe
from .config import Settings, get_settings
from .db import Base, SessionLocal, engine
from .exceptions import RequestNotFoundError, StoreError
from .executor import execute
from .logging_setup import get_logger, setup_logging
from .schemas import (
    ApiResponse,
    Collection,
    CollectionIn,
    HistoryEntry,
    RequestConfig,
    ResponseFacts,
    SavedRequest,
    SavedRequestData,
    SaveRequest,
    SendResult,
)
from .service import handle_save_request, record_history
from .store import SqlRequestStore

setup_logging(get_settings().log_level, json_logs=get_settings().log_json)
logger = get_logger(__name__)

app = FastAPI(title="API Playground Backend", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Base.metadata.create_all(bind=engine)


def get_session_factory():
    return SessionLocal


def get_db(session_factory=Depends(get_session_factory)):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


def get_store(db: Session = Depends(get_db)) -> SqlRequestStore:
    return SqlRequestStore(db)


def get_transport() -> Optional[httpx.AsyncBaseTransport]:
    # None means the real network; tests swap in httpx.MockTransport
    return None


def _store_error(exc: StoreError) -> HTTPException:
    if isinstance(exc, RequestNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    logger.error("Store failure", error=str(exc))
    return HTTPException(status_code=503, detail="Request store unavailable")


def _record_history_task(session_factory, config: RequestConfig, response: ApiResponse) -> None:
    # runs after the response is sent, so it needs its own session
    db = session_factory()
    try:
        record_history(SqlRequestStore(db), config, response)
    finally:
        db.close()


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/send", response_model=SendResult, responses={204: {"description": "Empty URL, nothing sent"}})
async def send(
    config: RequestConfig,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(get_settings),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_transport),
    session_factory=Depends(get_session_factory),
):
    def schedule_history(cfg: RequestConfig, resp: ApiResponse) -> None:
        background_tasks.add_task(_record_history_task, session_factory, cfg, resp)

    response = await execute(
        config,
        settings=settings,
        transport=transport,
        on_success=schedule_history,
    )
    if response is None:
        return Response(status_code=204)

    return SendResult(response=response, facts=describe(response))


@app.post("/classify", response_model=ResponseFacts)
def classify(response: ApiResponse):
    return describe(response)


@app.get("/collections", response_model=List[Collection])
def list_collections(store: SqlRequestStore = Depends(get_store)):
    try:
        return store.list_collections()
    except StoreError as exc:
        raise _store_error(exc) from exc


@app.post("/collections", response_model=Collection)
def create_collection(payload: CollectionIn, store: SqlRequestStore = Depends(get_store)):
    try:
        return store.create_collection(payload.name)
    except StoreError as exc:
        raise _store_error(exc) from exc


@app.get("/requests")
def list_requests(
    collection_id: Optional[List[int]] = Query(None),
    store: SqlRequestStore = Depends(get_store),
):
    try:
        grouped = store.list_requests_by_collection(collection_id)
    except StoreError as exc:
        raise _store_error(exc) from exc
    return {k: [r.model_dump(mode="json") for r in v] for k, v in grouped.items()}


@app.post("/requests")
def save_request(payload: SaveRequest, store: SqlRequestStore = Depends(get_store)):
    request_id = handle_save_request(
        store,
        payload.config,
        name=payload.name,
        collection_id=payload.collection_id,
        current_request_id=payload.current_request_id,
    )
    return {"id": request_id}


@app.put("/requests/{request_id}", status_code=204)
def update_request(request_id: int, payload: SavedRequestData, store: SqlRequestStore = Depends(get_store)):
    try:
        store.update_request(request_id, payload)
    except StoreError as exc:
        raise _store_error(exc) from exc
    return Response(status_code=204)


@app.get("/requests/new", response_model=RequestConfig)
def new_request():
    return state.new_request()


@app.get("/requests/{request_id}", response_model=SavedRequest)
def get_request(request_id: int, store: SqlRequestStore = Depends(get_store)):
    try:
        return store.get_request(request_id)
    except StoreError as exc:
        raise _store_error(exc) from exc


@app.get("/requests/{request_id}/config", response_model=RequestConfig)
def load_request(request_id: int, store: SqlRequestStore = Depends(get_store)):
    try:
        saved = store.get_request(request_id)
    except StoreError as exc:
        raise _store_error(exc) from exc
    return state.load_saved_request(saved)


@app.get("/history", response_model=List[HistoryEntry])
def get_history(
    settings: Settings = Depends(get_settings),
    store: SqlRequestStore = Depends(get_store),
):
    try:
        return store.list_history(limit=settings.history_limit)
    except StoreError as exc:
        raise _store_error(exc) from exc
