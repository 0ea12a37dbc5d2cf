# app/core/config.py
# 應用程式設定 (例如資料庫連線字串、JWT 秘鑰等)
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # 資料庫設定
    DATABASE_URL: str
    # 設為 True 會在 console 印出 SQL 語句
    DATABASE_ECHO: bool = False
    # JWT 設定
    JWT_SECRET_KEY: str
    # JWT 演算法
    JWT_ALGORITHM: str = "HS256"
    # 存取令牌過期時間（分鐘）
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60
    # 前端來源 (CORS)，未設定時允許所有來源
    CLIENT_ORIGIN: str | None = None
    # 日誌等級
    LOG_LEVEL: str = "INFO"

    # 環境變數檔案
    class Config:
        env_file = ".env"

# 建立設定實例
settings = Settings()
