# app/repositories/user_repo.py
# 負責與使用者相關的資料庫操作
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import defer
from app.models.user import User

class UserRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> User | None:
        """
        透過 email 查詢使用者 (登入用，含密碼雜湊)
        """
        stmt = select(User).where(User.email == email)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def create_user(self, user: User) -> User:
        """
        新增使用者到資料庫
        """
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def get_user_by_id(self, user_id: str) -> User | None:
        """
        透過 user_id 查詢使用者，不載入密碼雜湊
        """
        stmt = (
            select(User)
            .where(User.user_id == user_id)
            .options(defer(User.password_hash, raiseload=True))
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def delete_user(self, user: User) -> None:
        """
        刪除使用者 (Profile 會一併被 cascade 刪除)
        """
        await self.db.delete(user)
        await self.db.commit()
