from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles

from app.core.config import settings
from app.core.logging_config import logger
from app.routes.quiz.quiz_routers import quiz_router
from app.routes.upload.upload_routers import upload_router

app = FastAPI(title="Valentine Quiz API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quiz_router)
app.include_router(upload_router)

if settings.BLOB_BACKEND == "local":
    Path(settings.BLOB_LOCAL_DIR).mkdir(parents=True, exist_ok=True)
    app.mount(settings.BLOB_PUBLIC_PATH, StaticFiles(directory=settings.BLOB_LOCAL_DIR), name="media")


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected malformed request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"detail": "Invalid request"})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"{request.method} {request.url.path} error: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Server error"})


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def read_root():
    return """
    <html>
        <head>
            <title>Valentine Quiz</title>
        </head>
        <body>
            <h1>Valentine Quiz API</h1>
            <p>Open a share link (<code>/?id=...</code> or <code>/?v=...</code>) in the app,
            or see the API docs <a href="/docs">here</a>.</p>
        </body>
    </html>
    """
