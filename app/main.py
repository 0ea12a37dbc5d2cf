import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import settings
from app.core.database import init_models
from app.core.exceptions import AppError
from app.routers import auth_router, profile_router


# 設定基礎日誌
logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__) # 建立一個 logger 實例


@asynccontextmanager
async def lifespan(app: FastAPI):
    # 啟動時建立資料表
    await init_models()
    logger.info("Database tables ready")
    yield


def _field_name(loc) -> str:
    # ('body', 'status') -> 'status'；整個 body 錯誤時 -> 'body'
    return str(loc[-1]) if loc else "body"


async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content=exc.errors, headers=exc.headers)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """
    將 FastAPI 預設的 422 改為 400，body 以欄位名稱為 key
    e.g. {"status": "status field is required"}
    """
    errors = {}
    for error in exc.errors():
        field = _field_name(error.get("loc", ()))
        if error.get("type") == "missing":
            message = f"{field} field is required"
        else:
            message = error.get("msg", "Invalid value").removeprefix("Value error, ")
        errors.setdefault(field, message)
    return JSONResponse(status_code=400, content=errors)


async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    # 內部細節只寫入 log，不回傳給前端
    logger.exception("Storage fault on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Server error"})


def create_app() -> FastAPI:
    app = FastAPI(title="DevConnector API", lifespan=lifespan)

    # --- 設定 CORS (跨來源資源共用) ---
    # 有設定 CLIENT_ORIGIN 時只允許該來源，否則允許所有來源
    allow_origins = [settings.CLIENT_ORIGIN] if settings.CLIENT_ORIGIN else ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=True,
        allow_methods=["*"], # 允許所有 HTTP 方法
        allow_headers=["*"], # 允許所有 HTTP 標頭 (含 x-auth-token)
    )

    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(SQLAlchemyError, storage_error_handler)

    # --- 根路徑 ---
    @app.get("/")
    def read_root():
        return {"status": "success", "message": "DeveloperConnector API is running"}

    @app.get("/healthz")
    def health_check():
        return {"status": "ok"}

    # --- 載入 API 路由 ---
    app.include_router(auth_router.router)
    app.include_router(profile_router.router)
    return app


app = create_app()
