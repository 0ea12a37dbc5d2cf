from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool
from app.core.config import settings

engine_options = {
    "pool_pre_ping": True, # 每次從連線池取連線前，先 PING 一次，確保連線有效
    "echo": settings.DATABASE_ECHO,
}

# SQLite (本機開發 / 測試) 必須共用同一條連線，否則 in-memory DB 每條連線都是空的
if settings.DATABASE_URL.startswith("sqlite"):
    engine_options["poolclass"] = StaticPool
    engine_options["connect_args"] = {"check_same_thread": False}

# 建立非同步引擎
engine = create_async_engine(settings.DATABASE_URL, **engine_options)

# 建立非同步 Session
AsyncSessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# 建立 ORM Model 基底類別
Base = declarative_base()

# (重要) 取得 DB Session 的 Dependency
async def get_db() -> AsyncSession:
    """FastAPI Dependency: 取得非同步資料庫 session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()

async def init_models() -> None:
    """啟動時建立所有資料表 (已存在的表不會被覆蓋)"""
    # 匯入所有 Model，確保都已註冊到 Base.metadata
    from app.models import user, profile  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
