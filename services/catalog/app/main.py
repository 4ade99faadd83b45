import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.catalog.router import router as catalog_router
from app.database import init_db
from app.dependencies import get_settings
from shared.middleware.error_handler import error_envelope_middleware
from shared.middleware.request_id import RequestIdLogFilter, request_id_middleware


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(levelname)s:%(name)s:[%(request_id)s] %(message)s",
    )
    for handler in logging.getLogger().handlers:
        if not any(isinstance(f, RequestIdLogFilter) for f in handler.filters):
            handler.addFilter(RequestIdLogFilter())


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.catalog_database_url, echo=settings.sql_echo)
    yield


SWAGGER_DESCRIPTION = """\
## Course Catalog Service

Multi-tenant course catalog with progressive video unlock.

### Domain Tags

| Tag | Description |
|-----|-------------|
| **Catalog** | Course listing with purchase status, module / topic statistics, per-video lock state, video navigation |

### Authentication

Read endpoints accept anonymous callers, who name their tenant with the
`X-Tenant-ID` header. A Bearer token carries `sub`, `role`, `tenant_id`
and, for students, `student_id`. Creating a course requires a token with
the `TENANT_ADMIN` or `SUPER_ADMIN` role.

### Unlock rule

```
first video of a topic   -> always UNLOCKED
any later video          -> UNLOCKED once the previous video is completed
anonymous viewer         -> everything after the first video LOCKED
```
"""


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Coursehub Catalog",
        version="0.1.0",
        description=SWAGGER_DESCRIPTION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )
    # Registered last runs first: request id wraps the error envelope
    app.middleware("http")(error_envelope_middleware)
    app.middleware("http")(request_id_middleware)

    app.include_router(catalog_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        return {"status": "ok", "service": "catalog"}

    return app


app = create_app()
