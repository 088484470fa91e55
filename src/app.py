"""Commerce FastAPI application.

Web server that validates and executes storefront actions synchronously
via HTTP. Every request runs inside the commerce domain context.

Usage:
    uvicorn app:app --app-dir src --host 0.0.0.0 --port 8000 --reload
"""

import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from protean.integrations.fastapi import register_exception_handlers

from commerce.domain import commerce
from commerce.utils.logging import configure_logging, log_context

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# PROTEAN_ENV selects the domain.toml overlay (e.g. "production").
configure_logging(log_dir=os.getenv("LOG_DIR"))
commerce.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Commerce Action Engine",
    description="Validates and executes conversational storefront actions",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the commerce domain context and bind the tenant to the log context."""
    tenant_id = request.path_params.get("tenant_id") if request.path_params else None
    path_parts = request.url.path.strip("/").split("/")
    if tenant_id is None and len(path_parts) >= 2 and path_parts[0] == "stores":
        tenant_id = path_parts[1]

    with log_context(tenant_id=tenant_id, path=request.url.path), commerce.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from commerce.api import store_router  # noqa: E402

app.include_router(store_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    return JSONResponse(content={"status": "ok", "domain": commerce.name})
