from fastapi import Depends, FastAPI, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from loguru import logger
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from rangeread import __version__
from rangeread.api.dependencies import SessionStore, get_pipeline, get_session_store
from rangeread.api.schemas import DraftsRequest, ExtractResponse, StartResponse, StateResponse
from rangeread.core.audit_logger import configure_logging
from rangeread.core.config import load_settings
from rangeread.core.errors import InvalidTransition, PipelineFailure, ValidationFailure
from rangeread.core.pipeline import process_image_and_extract_numbers
from rangeread.domain.models import SourceImage

app = FastAPI(title="RangeRead", version=__version__)


@app.on_event("startup")
async def startup_event():
    configure_logging(load_settings())
    logger.info("Starting RangeRead API...")


@app.exception_handler(InvalidTransition)
async def invalid_transition_handler(request: Request, exc: InvalidTransition):
    return JSONResponse(status_code=409, content={"detail": str(exc), "state": exc.state, "event": exc.event})


@app.exception_handler(ValidationFailure)
async def validation_failure_handler(request: Request, exc: ValidationFailure):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


async def _read_image(file: UploadFile) -> SourceImage:
    content = await file.read()
    if not content:
        raise HTTPException(400, "Empty file")
    return SourceImage.from_bytes(content, file.filename or "upload")


def _state(session_id: str, store: SessionStore, error: str = None) -> StateResponse:
    session = store.get(session_id)
    return StateResponse.from_state(session_id, session.state, session.generation, error=error)


@app.get("/health")
async def health_check():
    return {"status": "healthy", "version": __version__}


@app.get("/metrics")
async def metrics_endpoint():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.post("/extract", response_model=ExtractResponse)
async def extract_numbers(file: UploadFile = File(...), pipeline=Depends(get_pipeline)):
    """Run crop, OCR and number extraction once, without a review cycle."""
    image = await _read_image(file)
    try:
        numbers = await process_image_and_extract_numbers(image, pipeline)
    except PipelineFailure as e:
        raise HTTPException(status_code=422, detail={"stage": e.stage.value, "message": e.message})
    return ExtractResponse(file=image.uri, numbers=numbers)


@app.post("/sessions", response_model=StateResponse, status_code=201)
async def create_session(pipeline=Depends(get_pipeline), store: SessionStore = Depends(get_session_store)):
    session_id = store.create(pipeline)
    return _state(session_id, store)


@app.get("/sessions/{session_id}", response_model=StateResponse)
async def get_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    return _state(session_id, store)


@app.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.delete(session_id)
    return Response(status_code=204)


@app.post("/sessions/{session_id}/image", response_model=StateResponse)
async def submit_image(session_id: str, file: UploadFile = File(...),
                       store: SessionStore = Depends(get_session_store)):
    session = store.get(session_id)
    image = await _read_image(file)
    try:
        await session.submit_image(image)
    except PipelineFailure as e:
        body = _state(session_id, store, error=str(e))
        return JSONResponse(status_code=422, content=body.model_dump())
    return _state(session_id, store)


@app.post("/sessions/{session_id}/retry", response_model=StateResponse)
async def retry(session_id: str, store: SessionStore = Depends(get_session_store)):
    session = store.get(session_id)
    try:
        await session.retry()
    except PipelineFailure as e:
        body = _state(session_id, store, error=str(e))
        return JSONResponse(status_code=422, content=body.model_dump())
    return _state(session_id, store)


@app.post("/sessions/{session_id}/abandon", response_model=StateResponse)
async def abandon(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.get(session_id).abandon()
    return _state(session_id, store)


@app.post("/sessions/{session_id}/accept", response_model=StateResponse)
async def accept(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.get(session_id).accept()
    return _state(session_id, store)


@app.post("/sessions/{session_id}/modify", response_model=StateResponse)
async def modify(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.get(session_id).modify()
    return _state(session_id, store)


@app.put("/sessions/{session_id}/drafts", response_model=StateResponse)
async def edit_drafts(session_id: str, drafts: DraftsRequest, store: SessionStore = Depends(get_session_store)):
    store.get(session_id).edit(drafts.draft1, drafts.draft2)
    return _state(session_id, store)


@app.post("/sessions/{session_id}/save", response_model=StateResponse)
async def save(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.get(session_id).save()
    return _state(session_id, store)


@app.post("/sessions/{session_id}/cancel", response_model=StateResponse)
async def cancel(session_id: str, store: SessionStore = Depends(get_session_store)):
    store.get(session_id).cancel()
    return _state(session_id, store)


@app.post("/sessions/{session_id}/start", response_model=StartResponse)
async def start(session_id: str, store: SessionStore = Depends(get_session_store)):
    pair = store.get(session_id).start()
    return StartResponse(session_id=session_id, pair=list(pair.as_tuple()))
