import json
import time
import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator, Optional
from fastapi import Depends, FastAPI, Header, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse, StreamingResponse
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST, REGISTRY

from base import IntegrationStoreBase
from config.settings import settings
from llm.openai_client import ChatCompletionProvider
from models import ChatRequest, StreamChunk
from relay import CompletionRelay
from tools import to_openai_tools
from tools.executor import ToolExecutor
from utils import get_store_class


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "level": record.levelname,
            "ts": time.strftime("%Y-%m-%dT%H:%M:%SZ", time.gmtime(record.created)),
            "msg": record.getMessage(),
            "logger": record.name,
        }
        if hasattr(record, "extra_data"):
            base.update(getattr(record, "extra_data"))
        if record.exc_info:
            base["exc"] = self.formatException(record.exc_info)
        return json.dumps(base, default=str)


handler = logging.StreamHandler()
handler.setFormatter(JsonFormatter() if settings.logging.json_logging else logging.Formatter(logging.BASIC_FORMAT))
logger = logging.getLogger("app")
logger.setLevel(settings.logging.level)
if not logger.handlers:
    logger.addHandler(handler)
logger.propagate = False

REQUEST_COUNTER: Optional[Counter] = None
REQUEST_LATENCY: Optional[Histogram] = None


def init_metrics(registry=REGISTRY) -> None:
    global REQUEST_COUNTER, REQUEST_LATENCY
    if REQUEST_COUNTER is None:
        REQUEST_COUNTER = Counter(
            "chat_requests_total",
            "Total /chat exchanges by outcome",
            ["status"],
            registry=registry,
        )
    if REQUEST_LATENCY is None:
        REQUEST_LATENCY = Histogram(
            "chat_request_seconds",
            "Duration of /chat exchanges in seconds",
            registry=registry,
        )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_metrics()
    app.state.provider = ChatCompletionProvider()
    app.state.store = get_store_class(settings.modules.integration_store_name)()
    logger.info("Started", extra={"extra_data": {"store": settings.modules.integration_store_name}})
    try:
        yield
    finally:
        await app.state.provider.close()
        app.state.store.close()


app = FastAPI(title="insightAI chat", version="1.0.0", lifespan=lifespan)


def get_provider(request: Request) -> ChatCompletionProvider:
    return request.app.state.provider


def get_store(request: Request) -> IntegrationStoreBase:
    return request.app.state.store


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    return x_user_id or settings.default_user_id


@app.exception_handler(RequestValidationError)
async def invalid_request(request: Request, exc: RequestValidationError):
    logger.warning("Rejected request", extra={"extra_data": {"path": request.url.path}})
    return JSONResponse(status_code=400, content={
        "error": "Invalid chat request",
        "detail": jsonable_encoder(exc.errors()),
    })


@app.get("/healthz", response_class=PlainTextResponse)
def healthz():
    return "ok"


@app.get("/metrics")
def metrics():
    return PlainTextResponse(generate_latest(), media_type=CONTENT_TYPE_LATEST)


@app.get("/tools")
def list_tools():
    return to_openai_tools()


async def event_stream(chunks: AsyncGenerator[StreamChunk, None], request_id: str, user_id: str) -> AsyncIterator[str]:
    init_metrics()
    start = time.time()
    status = "disconnected"
    try:
        async for chunk in chunks:
            if chunk.is_complete:
                status = "error" if chunk.error else "ok"
            yield chunk.to_sse()
    finally:
        await chunks.aclose()
        REQUEST_COUNTER.labels(status=status).inc()
        REQUEST_LATENCY.observe(time.time() - start)
        logger.info(
            "Handled chat",
            extra={"extra_data": {"request_id": request_id, "user_id": user_id, "status": status}}
        )


@app.post("/chat")
async def chat(req: ChatRequest,
               provider: ChatCompletionProvider = Depends(get_provider),
               store: IntegrationStoreBase = Depends(get_store),
               user_id: str = Depends(get_user_id)):
    request_id = str(uuid.uuid4())
    relay = CompletionRelay(provider, ToolExecutor(store, user_id), request_id=request_id)
    messages = [m.model_dump(exclude_none=True) for m in req.messages]
    return StreamingResponse(
        event_stream(relay.relay(messages, req.options), request_id, user_id),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app:app", host="0.0.0.0", port=8000)
