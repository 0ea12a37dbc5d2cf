import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.exceptions import AuthenticationError
from app.core.security import get_current_user
from app.models.user import User
from app.services.auth_service import AuthService
from app.schemas.user_schema import Token, UserCreate, UserLogin, UserOut


logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users", # 路由前綴
    tags=["Users"]    # API 文件分類標籤
)


@router.post("/register", response_model=UserOut, status_code=status.HTTP_201_CREATED)
async def register_new_user(
    user_data: UserCreate, # Request Body 會被 Pydantic 驗證
    db: AsyncSession = Depends(get_db)
):
    """
    註冊新使用者

    - 密碼至少 6 碼，且兩次輸入必須相同。
    """
    auth_service = AuthService(db)

    # 服務層拋出的 AppError 會由 main.py 的 handler 轉成 JSON
    return await auth_service.register_user(user_data)


@router.post("/login", response_model=Token)
async def login_for_access_token(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """
    提供 email 和密碼以取得 Access Token
    """
    auth_service = AuthService(db)
    user = await auth_service.authenticate_user(
        email=credentials.email,
        password=credentials.password
    )

    if not user:
        logger.info("Failed login attempt for %s", credentials.email)
        raise AuthenticationError("Incorrect email or password")

    logger.info("User logged in: %s", user.user_id)

    access_token = auth_service.create_login_token(user)
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/current", response_model=UserOut)
async def read_current_user(
    current_user: User = Depends(get_current_user)
):
    """
    獲取當前登入使用者的基本資料 (不含密碼)
    """
    return current_user
