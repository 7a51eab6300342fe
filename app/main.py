from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from app.db import Base, engine
from app.errors import AuctionError, InternalError
from app.utils import logger
from app.api.routes import router as api_router
from app.api.admin import router as admin_router
import app.models  # noqa: F401 ensure models are imported so tables are known

# create FastAPI instance
app = FastAPI(title="Painting Auction")

app.include_router(api_router)
app.include_router(admin_router)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


@app.exception_handler(AuctionError)
async def auction_error_handler(request: Request, exc: AuctionError):
    return _error(exc.status_code, exc.message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errs = exc.errors()
    if errs:
        field = ".".join(str(p) for p in errs[0].get("loc", ()) if p != "body")
        message = f"{field}: {errs[0].get('msg')}" if field else errs[0].get("msg")
    else:
        message = "Invalid request"
    return _error(400, message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s: %s", request.method, request.url.path, exc)
    return _error(InternalError.status_code, InternalError.message)


@app.on_event("startup")
def on_startup_create_tables():
    # Ensure database tables are created on startup
    Base.metadata.create_all(bind=engine)
