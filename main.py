import logging

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.database import Database
from starlette.exceptions import HTTPException as StarletteHTTPException

from config import Config
from database import get_db
from routers import all_routers

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=Config.APP_NAME, version="1.0.0")

# CORS for the admin dashboard
app.add_middleware(
    CORSMiddleware,
    allow_origins=Config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------- Error envelope ----------
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"success": False, "error": exc.detail})


def describe_validation_error(errors) -> str:
    if any(err.get("type") == "json_invalid" for err in errors):
        return "Invalid JSON body"
    missing = [
        ".".join(str(p) for p in err["loc"][1:]) or err["loc"][0]
        for err in errors
        if err.get("type") == "missing"
    ]
    if missing:
        return f"Missing required fields: {', '.join(missing)}"
    first = errors[0]
    field = ".".join(str(p) for p in first["loc"][1:]) or first["loc"][0]
    return f"Invalid value for {field}: {first['msg']}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": describe_validation_error(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": "Internal server error", "message": str(exc)},
    )


# ---------- Routes ----------
for router in all_routers:
    app.include_router(router)


@app.get("/test")
def test(db: Database = Depends(get_db)):
    # Simple round-trip to the DB
    return {"ok": True, "message": "Backend is running", "collections": db.list_collection_names()}


@app.get("/")
def root():
    return {"name": Config.APP_NAME, "status": "ok"}
