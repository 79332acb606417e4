# main.py
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from campusvote import __version__, config
from campusvote.errors import StorageError
from campusvote.routes.admin_routes import admin_router
from campusvote.routes.auth_routes import auth_router
from campusvote.routes.election_routes import router as election_router
from campusvote.routes.position_routes import candidate_router, position_router
from campusvote.routes.result_routes import result_router
from campusvote.routes.vote_routes import vote_router

logging.basicConfig(level=config.LOG_LEVEL)
logger = logging.getLogger(__name__)

app = FastAPI(title="CampusVote - Student Election API", version=__version__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (auth_router, election_router, position_router, candidate_router, vote_router, result_router, admin_router):
    app.include_router(router, prefix=config.API_PREFIX)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"message": "Validation error", "error": "validation_error", "errors": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(StorageError)
@app.exception_handler(PyMongoError)
async def storage_exception_handler(request: Request, exc: Exception):
    logger.error(f"Storage failure on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Internal Server Error", "error": "storage_failure"})


@app.get(f"{config.API_PREFIX}/health", tags=["Root"])
def health_check():
    return {"status": "healthy", "database": "MongoDB"}


@app.get("/", tags=["Root"])
def read_root():
    return {"message": "Welcome to the CampusVote API"}


@app.get("/favicon.ico", include_in_schema=False)
async def favicon():
    return Response(status_code=204)
