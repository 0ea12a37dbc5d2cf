# app/core/security.py
# 負責密碼雜湊與 JWT 權杖的產生、擷取與驗證
import logging
from datetime import datetime, timedelta, timezone
from typing import Mapping, Optional

from passlib.context import CryptContext
from jose import JWTError, jwt
from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthenticationError, VerificationError
from app.repositories.user_repo import UserRepository
from app.models.user import User

logger = logging.getLogger(__name__)

# 1. 密碼雜湊設定 (Bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# 歷史上簽發 Token 時用過的使用者 ID 欄位 (依序嘗試)
SUBJECT_CLAIMS = ("id", "_id", "sub")

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """驗證明文密碼是否與雜湊值相符"""
    return pwd_context.verify(plain_password, hashed_password)

def get_password_hash(password: str) -> str:
    """產生密碼的雜湊值"""
    return pwd_context.hash(password)

# 2. JWT 權杖產生
def create_access_token(data: dict) -> str:
    """
    根據傳入的 data (e.g., id / name / avatar) 產生 JWT access token
    """
    to_encode = data.copy() # 避免修改原始資料
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})

    encoded_jwt = jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt

# 3. 從 Header 擷取 Token
def extract_token(headers: Mapping[str, str]) -> Optional[str]:
    """
    依序接受：
    1. Authorization: Bearer <token> (Bearer 不分大小寫)
    2. Authorization: <token>
    3. Authorization: <其他 scheme> <token>
    4. x-auth-token: <token>
    都沒有則回傳 None
    """
    auth = headers.get("authorization")
    if auth:
        parts = auth.split(" ")
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]
        if len(parts) == 1:
            return parts[0]
        # (刻意寬鬆) 舊版前端可能送錯 scheme，仍取第二段當 Token
        # 這是相容性行為，不是安全建議
        if len(parts) == 2:
            return parts[1]

    legacy_token = headers.get("x-auth-token")
    if legacy_token:
        return legacy_token

    return None

# 4. JWT 權杖驗證
def decode_access_token(token: str) -> Optional[str]:
    """
    驗證簽章與過期時間，回傳使用者 ID；任何失敗都回傳 None
    """
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        return None

    for claim in SUBJECT_CLAIMS:
        subject = payload.get(claim)
        if subject:
            return str(subject)
    return None

async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    FastAPI 依賴項：驗證 Token 並回傳 User Model (不含密碼雜湊)
    - 憑證缺漏 / 無效 / 過期 / 使用者不存在 -> 401
    - 查詢使用者時資料庫出錯 -> 500 (不當成未登入)
    """
    token = extract_token(request.headers)
    if not token:
        raise AuthenticationError()

    user_id = decode_access_token(token)
    if user_id is None:
        raise AuthenticationError()

    user_repo = UserRepository(db)
    try:
        user = await user_repo.get_user_by_id(user_id)
    except SQLAlchemyError:
        logger.exception("Failed to look up user %s while verifying token", user_id)
        raise VerificationError()

    if user is None:
        raise AuthenticationError()

    return user
