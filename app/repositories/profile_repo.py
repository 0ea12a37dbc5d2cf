# app/repositories/profile_repo.py
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from app.models.profile import Profile, Experience, Education
from app.schemas.profile_schema import ExperienceCreate, EducationCreate
from typing import Any, Dict, List, Optional
import uuid


class ProfileRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    def _select_profile(self):
        # (重要) 明確指定 Eager Loading：擁有者 (name/avatar) 與子項目
        # populate_existing 確保 commit 後重新查詢時拿到資料庫的最新狀態
        return (
            select(Profile)
            .options(
                selectinload(Profile.user),
                selectinload(Profile.experience),
                selectinload(Profile.education),
            )
            .execution_options(populate_existing=True)
        )

    # --- 查詢 ---
    async def get_profile_by_user_id(self, user_id: str) -> Profile | None:
        stmt = self._select_profile().where(Profile.user_id == user_id)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def get_profile_by_handle(self, handle: str) -> Profile | None:
        stmt = self._select_profile().where(Profile.handle == handle)
        result = await self.db.execute(stmt)
        return result.scalars().first()

    async def list_profiles(self) -> List[Profile]:
        stmt = self._select_profile().order_by(Profile.created_at)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def find_handle_owner(self, handle: str, exclude_user_id: str) -> Optional[str]:
        """
        查詢「其他」使用者是否已經使用這個 handle，回傳該使用者 ID
        """
        stmt = select(Profile.user_id).where(
            Profile.handle == handle,
            Profile.user_id != exclude_user_id,
        )
        result = await self.db.execute(stmt)
        return result.scalars().first()

    # --- 建立 / 更新 ---
    async def create_profile(self, user_id: str, fields: Dict[str, Any]) -> Profile:
        # 預設值只在建立時套用
        values = {"skills": [], "social": {}, **fields}
        new_profile = Profile(
            **values,
            profile_id=str(uuid.uuid4()),
            user_id=user_id
        )
        self.db.add(new_profile)
        await self.db.commit()
        return new_profile

    async def update_profile(self, profile: Profile, fields: Dict[str, Any]) -> Profile:
        """只覆蓋有傳入的欄位，其餘維持原值"""
        for key, value in fields.items():
            setattr(profile, key, value)

        await self.db.commit()
        return profile

    async def delete_profile(self, profile: Profile) -> None:
        await self.db.delete(profile)
        await self.db.commit()

    # --- Experience / Education ---
    @staticmethod
    def _next_position(entries) -> int:
        return max((entry.position for entry in entries), default=0) + 1

    async def add_experience(self, profile: Profile, data: ExperienceCreate) -> Experience:
        entry = Experience(
            **data.model_dump(),
            id=str(uuid.uuid4()),
            position=self._next_position(profile.experience),
        )
        # 最新的放最前面
        profile.experience.insert(0, entry)
        await self.db.commit()
        return entry

    async def add_education(self, profile: Profile, data: EducationCreate) -> Education:
        entry = Education(
            **data.model_dump(),
            id=str(uuid.uuid4()),
            position=self._next_position(profile.education),
        )
        profile.education.insert(0, entry)
        await self.db.commit()
        return entry

    async def remove_experience(self, profile: Profile, entry: Experience) -> None:
        # delete-orphan：從列表移除即刪除該筆資料
        profile.experience.remove(entry)
        await self.db.commit()

    async def remove_education(self, profile: Profile, entry: Education) -> None:
        profile.education.remove(entry)
        await self.db.commit()
