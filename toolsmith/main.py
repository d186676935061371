import logging
import time
import uuid
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from toolsmith.auth import require_member
from toolsmith.config import Settings
from toolsmith.errors import InvalidInput, ToolsmithError
from toolsmith.extractor import extract
from toolsmith.ideas import suggest_ideas
from toolsmith.llm_client import LLMClient
from toolsmith.models import ExtractRequest, GenerateRequest, IdeasRequest, PublishRequest, UpdateRequest
from toolsmith.publisher import ContentStore, list_recent, publish
from toolsmith.refiner import refine
from toolsmith.synthesizer import synthesize

log = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app and its collaborators once; handlers reach them through app.state."""
    settings = settings or Settings.from_env()
    if not logging.getLogger().handlers:
        logging.basicConfig(
            level=settings.log_level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    app = FastAPI(title="toolsmith")
    app.state.settings = settings
    app.state.llm = LLMClient(settings)
    app.state.store = ContentStore(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        rid = str(uuid.uuid4())
        start = time.time()
        request.state.request_id = rid
        response = None
        try:
            response = await call_next(request)
            return response
        finally:
            dur_ms = int((time.time() - start) * 1000)
            log.info(
                "rid=%s method=%s path=%s status=%s dur_ms=%d",
                rid,
                request.method,
                request.url.path,
                getattr(response, "status_code", "?"),
                dur_ms,
            )

    @app.exception_handler(ToolsmithError)
    async def toolsmith_error_handler(request: Request, exc: ToolsmithError):
        log.info("request failed path=%s kind=%s message=%s", request.url.path, exc.kind, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        problems = []
        for err in exc.errors():
            where = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
            problems.append(f"{where}: {err.get('msg')}" if where else str(err.get("msg")))
        error = InvalidInput("Invalid request: " + "; ".join(problems or ["malformed body"]))
        log.info("request failed path=%s kind=%s message=%s", request.url.path, error.kind, error.message)
        return JSONResponse(status_code=error.status_code, content=error.to_payload())

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok"}

    @app.get("/llm/status")
    def llm_status(request: Request) -> Dict[str, Any]:
        return request.app.state.llm.status()

    @app.post("/extract")
    def extract_endpoint(req: ExtractRequest, request: Request) -> Dict[str, Any]:
        article = extract(req.url, request.app.state.settings)
        return article.model_dump()

    @app.post("/ideas")
    def ideas_endpoint(req: IdeasRequest, request: Request) -> Dict[str, Any]:
        return {"ideas": suggest_ideas(request.app.state.llm, req.content)}

    @app.post("/generate")
    def generate_endpoint(req: GenerateRequest, request: Request) -> Dict[str, Any]:
        result = synthesize(request.app.state.llm, req.content, idea=req.idea, requirements=req.userRequirements)
        body: Dict[str, Any] = {"tool": result.code}
        if result.warnings:
            body["warnings"] = result.warnings
        return body

    @app.post("/update")
    def update_endpoint(req: UpdateRequest, request: Request) -> Dict[str, Any]:
        result = refine(request.app.state.llm, req.content, req.currentTool, req.feedback, req.history)
        return {"tool": result.code, "history": [turn.model_dump() for turn in result.history]}

    @app.post("/publish")
    def publish_endpoint(
        req: PublishRequest,
        request: Request,
        user_id: str = Depends(require_member),
    ) -> Dict[str, Any]:
        metadata = publish(request.app.state.store, user_id, req.filename, req.html)
        return {"url": metadata.url}

    @app.get("/recent")
    def recent_endpoint(request: Request, user_id: str = Depends(require_member)) -> Dict[str, Any]:
        tools = list_recent(request.app.state.store, user_id)
        return {"tools": [t.model_dump() for t in tools]}

    return app


app = create_app()
