from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from ncr_tracker.core.config import settings
from ncr_tracker.core.errors import install_error_handlers
from ncr_tracker.core.http_logging import configure_logging, install_request_logging
from ncr_tracker.api.router import router as api_router

configure_logging(settings.LOG_LEVEL)

app = FastAPI(title=settings.APP_NAME, version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_request_logging(app)
install_error_handlers(app)

app.include_router(api_router, prefix="/api")

@app.get("/health")
def health():
    return {"status": "ok"}
