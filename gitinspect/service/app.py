"""FastAPI application serving repository inspection pages."""

from __future__ import annotations

import asyncio
import re
from pathlib import Path
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from pydantic import BaseModel

from ..config import GitInspectConfig, load_config
from ..logging import get_logger, route_server_logs
from ..models import AnalysisResult, Inspection
from ..orchestrator import Orchestrator

_TEMPLATES_DIR = Path(__file__).with_name("templates")
_REPOSITORY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+$")

_SECURITY_HEADERS = {
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def content_security_policy(settings: GitInspectConfig) -> str:
    """Same-origin policy that lets pages reach GitHub and the completion host."""
    connect = ["'self'"]
    for url in (settings.github.api_url, settings.llm.url):
        host = urlparse(url).netloc
        if host and host not in connect:
            connect.append(host)
    directives = {
        "default-src": ["'self'"],
        "script-src": ["'self'", "'unsafe-inline'"],
        "style-src": ["'self'", "'unsafe-inline'"],
        "img-src": ["'self'", "data:", "github.com"],
        "connect-src": connect,
    }
    return "; ".join(f"{name} {' '.join(values)}" for name, values in directives.items())


_DEBUG_DIAGRAM = """
<div class="architecture-diagram">
  <h3>Test Architecture</h3>
  <div style="display: flex; gap: 1rem; justify-content: center; margin-top: 2rem;">
    <div style="background: rgba(110, 68, 255, 0.1); padding: 1.5rem; border-radius: 12px;
                border: 1px solid var(--primary); text-align: center;">
      <p>Frontend</p>
    </div>
    <div style="background: rgba(184, 146, 255, 0.1); padding: 1.5rem; border-radius: 12px;
                border: 1px solid var(--secondary); text-align: center;">
      <p>Backend</p>
    </div>
  </div>
</div>
"""


class HealthResponse(BaseModel):
    status: str


def create_app(
    orchestrator_factory: Optional[Callable[[], Orchestrator]] = None,
    config: GitInspectConfig | None = None,
) -> FastAPI:
    """Create the FastAPI application exposing inspection pages."""
    settings = config or load_config()
    logger = get_logger("service")
    templates = Jinja2Templates(directory=str(_TEMPLATES_DIR))
    headers = dict(_SECURITY_HEADERS)
    headers["Content-Security-Policy"] = content_security_policy(settings)

    def _default_orchestrator() -> Orchestrator:
        return Orchestrator(settings)

    factory = orchestrator_factory or _default_orchestrator

    app = FastAPI(title="GitInspect", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.service.allowed_origins,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )

    @app.middleware("http")
    async def security_headers(request: Request, call_next: Callable[..., Any]) -> Any:
        response = await call_next(request)
        for name, value in headers.items():
            response.headers.setdefault(name, value)
        return response

    async def get_orchestrator() -> Orchestrator:
        # Fresh instance per request so no state is shared across callers.
        return factory()

    async def _run_inspection(orchestrator: Orchestrator, owner: str, repo: str) -> Inspection:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, orchestrator.inspect, owner, repo)

    def _render_results(
        request: Request, title: str, repository: Dict[str, Any], analysis: AnalysisResult
    ) -> HTMLResponse:
        return templates.TemplateResponse(
            request,
            "results.html",
            {"title": title, "repo": repository, "analysis": analysis},
        )

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/", response_class=HTMLResponse)
    async def index(request: Request) -> HTMLResponse:
        return templates.TemplateResponse(request, "index.html", {"error": None})

    @app.get("/inspect", response_class=HTMLResponse)
    async def inspect_form(request: Request, repository: str = "") -> Any:
        candidate = repository.strip().strip("/")
        if candidate.startswith("https://github.com/"):
            candidate = candidate[len("https://github.com/"):]
        if not _REPOSITORY_PATTERN.match(candidate):
            return templates.TemplateResponse(
                request,
                "index.html",
                {"error": "Use the owner/repository format, e.g. octocat/Hello-World."},
                status_code=400,
            )
        return RedirectResponse(url=f"/inspect/{candidate}", status_code=303)

    @app.get("/inspect/{owner}/{repo}", response_class=HTMLResponse)
    async def inspect_repository(
        request: Request,
        owner: str,
        repo: str,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> HTMLResponse:
        inspection = await _run_inspection(orchestrator, owner, repo)
        analysis = inspection.analysis
        logger.info(
            "Analysis completed for %s/%s (summary=%d chars, diagram=%s)",
            owner,
            repo,
            len(analysis.summary),
            analysis.diagram_source,
        )
        if inspection.repository is None:
            repository = {"name": f"{owner}/{repo}", "description": "", "url": None}
            title = "GitInspect - Analysis error"
        else:
            repository = inspection.repository.to_dict()
            repository["created_display"] = inspection.repository.created_display
            repository["updated_display"] = inspection.repository.updated_display
            title = f"GitInspect - {inspection.repository.name}"
        return _render_results(request, title, repository, analysis)

    @app.get("/api/inspect/{owner}/{repo}")
    async def inspect_repository_json(
        owner: str,
        repo: str,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> JSONResponse:
        inspection = await _run_inspection(orchestrator, owner, repo)
        return JSONResponse(content=inspection.to_dict())

    @app.get("/debug/diagram", response_class=HTMLResponse)
    async def debug_diagram(request: Request) -> Any:
        if not settings.service.debug:
            return PlainTextResponse("Not found", status_code=404)
        analysis = AnalysisResult(
            summary="This is a display test",
            html_schema=_DEBUG_DIAGRAM,
            recommendations=[
                "Test recommendation 1",
                "Test recommendation 2",
                "Last test recommendation",
            ],
            diagram_source=True,
        )
        repository = {
            "name": "Debug Repo",
            "description": "Diagram display test",
            "url": "#",
            "language": "JavaScript",
        }
        return _render_results(request, "Debug Diagram", repository, analysis)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_: Request, exc: Exception) -> PlainTextResponse:
        logger.error("Unhandled server error: %s", exc, exc_info=exc)
        return PlainTextResponse("Internal server error", status_code=500)

    return app


def run_service(
    host: str | None = None,
    port: int | None = None,
    config: GitInspectConfig | None = None,
) -> None:  # pragma: no cover - integration path
    import uvicorn

    settings = config or load_config()
    app = create_app(config=settings)
    route_server_logs()
    uvicorn.run(
        app,
        host=host or settings.service.host,
        port=port or settings.service.port,
        log_config=None,
    )
