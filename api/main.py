"""FastAPI アプリケーション - UniqueId / descriptor エンドポイント"""
from typing import List, NoReturn, Optional

from fastapi import FastAPI, HTTPException, Body, Query
from pydantic import BaseModel, Field

from application.exceptions import DescriptorNotFoundError, DuplicateDescriptorError
from application.ports.logger import LoggerPort
from application.services.descriptor_service import DescriptorService
from domain.descriptor import DescriptorKind, DescriptorRecord
from domain.exceptions import FormatError, ValidationError
from domain.unique_id import Segment, UniqueId
from infrastructure.config.app_settings import AppSettings
from infrastructure.logging.log_setup import setup_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.registry.in_memory_descriptor_registry import InMemoryDescriptorRegistry


# リクエストモデル
class SegmentModel(BaseModel):
    type: str = Field(description="Segment type")
    value: str = Field(description="Segment value")


class ParseRequest(BaseModel):
    unique_id: str = Field(description="String form of a unique ID")


class FormatRequest(BaseModel):
    segments: List[SegmentModel] = Field(min_length=1, description="Segments, root first")


class AppendRequest(BaseModel):
    unique_id: str = Field(description="String form of the parent unique ID")
    type: str = Field(description="Type of the appended segment")
    value: str = Field(description="Value of the appended segment")


class RegisterEngineRequest(BaseModel):
    engine_id: str = Field(description="Engine identifier")
    display_name: Optional[str] = Field(default=None, description="Display name")


class RegisterDescriptorRequest(BaseModel):
    parent_id: str = Field(description="String form of the parent unique ID")
    segment_type: str = Field(description="Type of the new segment")
    value: str = Field(description="Value of the new segment")
    display_name: Optional[str] = Field(default=None, description="Display name")
    kind: DescriptorKind = Field(default=DescriptorKind.TEST, description="Descriptor kind")


# レスポンスモデル
class UniqueIdResponse(BaseModel):
    unique_id: str = Field(description="Canonical string form")
    segments: List[SegmentModel] = Field(description="Segments, root first")
    engine_id: Optional[str] = Field(default=None, description="Engine ID when the root is an engine")


class DescriptorResponse(BaseModel):
    unique_id: str = Field(description="Canonical string form")
    display_name: str = Field(description="Display name")
    kind: DescriptorKind = Field(description="Descriptor kind")
    engine_id: Optional[str] = Field(default=None, description="Owning engine ID")


# FastAPIアプリケーション
app = FastAPI(
    title="UniqueId Service",
    description="テスト成果物の UniqueId を生成・解析するサービス",
    version="1.0.0"
)

# 設定
SETTINGS = AppSettings.from_env()
setup_logging(SETTINGS.log_level, SETTINGS.log_serialize)
DESCRIPTOR_REGISTRY = InMemoryDescriptorRegistry()


def _build_logger() -> LoggerPort:
    return LoguruLogger()


def _build_descriptor_service(logger: LoggerPort) -> DescriptorService:
    return DescriptorService(registry=DESCRIPTOR_REGISTRY, logger=logger)


def _to_unique_id_response(unique_id: UniqueId) -> UniqueIdResponse:
    return UniqueIdResponse(
        unique_id=str(unique_id),
        segments=[SegmentModel(type=s.type, value=s.value) for s in unique_id.segments],
        engine_id=unique_id.engine_id,
    )


def _to_descriptor_response(record: DescriptorRecord) -> DescriptorResponse:
    return DescriptorResponse(
        unique_id=str(record.unique_id),
        display_name=record.display_name,
        kind=record.kind,
        engine_id=record.unique_id.engine_id,
    )


def _raise_http(exc: Exception, logger: LoggerPort, event: str) -> NoReturn:
    if isinstance(exc, FormatError):
        logger.warning(event, error=str(exc), text=exc.text, position=exc.position)
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, ValidationError):
        logger.warning(event, error=str(exc))
        raise HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, DuplicateDescriptorError):
        logger.warning(event, error=str(exc))
        raise HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, DescriptorNotFoundError):
        logger.warning(event, error=str(exc))
        raise HTTPException(status_code=404, detail=str(exc))
    logger.error(event, error=str(exc))
    raise exc


@app.get("/")
def read_root():
    """ヘルスチェック"""
    return {"status": "ok", "service": "unique-id"}


@app.post("/ids/parse", response_model=UniqueIdResponse)
def parse_unique_id(request: ParseRequest = Body(...)) -> UniqueIdResponse:
    logger = _build_logger()
    try:
        return _to_unique_id_response(UniqueId.parse(request.unique_id))
    except FormatError as e:
        _raise_http(e, logger, "unique_id.parse_failed")


@app.post("/ids/format", response_model=UniqueIdResponse)
def format_unique_id(request: FormatRequest = Body(...)) -> UniqueIdResponse:
    logger = _build_logger()
    try:
        root, *rest = request.segments
        unique_id = UniqueId.root(root.type, root.value)
        for segment in rest:
            unique_id = unique_id.append_segment(Segment(segment.type, segment.value))
        return _to_unique_id_response(unique_id)
    except ValidationError as e:
        _raise_http(e, logger, "unique_id.format_failed")


@app.post("/ids/append", response_model=UniqueIdResponse)
def append_segment(request: AppendRequest = Body(...)) -> UniqueIdResponse:
    logger = _build_logger()
    try:
        parent = UniqueId.parse(request.unique_id)
        return _to_unique_id_response(parent.append(request.type, request.value))
    except (FormatError, ValidationError) as e:
        _raise_http(e, logger, "unique_id.append_failed")


@app.post("/engines", response_model=DescriptorResponse)
def register_engine(request: RegisterEngineRequest = Body(...)) -> DescriptorResponse:
    logger = _build_logger().bind(engine_id=request.engine_id)
    service = _build_descriptor_service(logger)
    try:
        record = service.register_engine(request.engine_id, request.display_name)
        return _to_descriptor_response(record)
    except (ValidationError, DuplicateDescriptorError) as e:
        _raise_http(e, logger, "descriptor.register_failed")


@app.post("/descriptors", response_model=DescriptorResponse)
def register_descriptor(request: RegisterDescriptorRequest = Body(...)) -> DescriptorResponse:
    logger = _build_logger().bind(parent_id=request.parent_id)
    service = _build_descriptor_service(logger)
    try:
        parent_id = UniqueId.parse(request.parent_id)
        record = service.register_child(
            parent_id,
            request.segment_type,
            request.value,
            display_name=request.display_name,
            kind=request.kind,
        )
        return _to_descriptor_response(record)
    except (FormatError, ValidationError, DuplicateDescriptorError, DescriptorNotFoundError) as e:
        _raise_http(e, logger, "descriptor.register_failed")


@app.get("/descriptors", response_model=DescriptorResponse)
def get_descriptor(unique_id: str = Query(...)) -> DescriptorResponse:
    logger = _build_logger()
    service = _build_descriptor_service(logger)
    try:
        return _to_descriptor_response(service.resolve(unique_id))
    except (FormatError, DescriptorNotFoundError) as e:
        _raise_http(e, logger, "descriptor.lookup_failed")


@app.get("/descriptors/children", response_model=List[DescriptorResponse])
def get_descriptor_children(unique_id: str = Query(...)) -> List[DescriptorResponse]:
    logger = _build_logger()
    service = _build_descriptor_service(logger)
    try:
        records = service.children(UniqueId.parse(unique_id))
        return [_to_descriptor_response(record) for record in records]
    except (FormatError, DescriptorNotFoundError) as e:
        _raise_http(e, logger, "descriptor.lookup_failed")
