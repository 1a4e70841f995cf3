from fastapi import FastAPI
from fastapi import Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from giveaway.api.routes import router
from giveaway.api.admin_routes import router as admin_router
from giveaway.observability.logging import log
from giveaway.settings import settings

app = FastAPI(title="Giveaway Entry API")

# The entry form is served from a separate static site
origins = [x.strip() for x in settings.CORS_ORIGINS.split(",") if x.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)
app.include_router(admin_router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "message": "Giveaway entry API is running. Start an entry with POST /api/entries."
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.exception_handler(Exception)
async def universal_exception_handler(request: Request, exc: Exception):
    # Workflow failures are reported inside the form view; anything reaching here is a bug.
    try:
        log(event="unhandled_exception", path=str(request.url.path), errorType=type(exc).__name__, error=str(exc)[:500])
    except Exception:
        pass
    return JSONResponse(
        status_code=500,
        content={"status": "error", "detail": "Something went wrong. Please try again."},
    )
