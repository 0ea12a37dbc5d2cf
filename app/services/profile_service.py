# app/services/profile_service.py
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError, ValidationError
from app.models.profile import Profile
from app.models.user import User
from app.repositories.profile_repo import ProfileRepository
from app.repositories.user_repo import UserRepository
from app.schemas.profile_schema import ProfileUpsert, ExperienceCreate, EducationCreate
from app.utils.profile_fields import build_profile_fields, normalize_handle

logger = logging.getLogger(__name__)

NO_PROFILE = {"noprofile": "There is no profile for this user"}
PROFILE_NOT_FOUND = {"noprofile": "Profile not found"}
HANDLE_TAKEN = {"handle": "That handle already exists"}


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.repo = ProfileRepository(db)
        self.db = db # Service 需要直接存取 db (rollback)

    # --- 查詢 ---
    async def get_my_profile(self, user: User) -> Profile:
        profile = await self.repo.get_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError(NO_PROFILE)
        return profile

    async def get_profile_by_handle(self, handle: str) -> Profile:
        """handle 不分大小寫、忽略前後空白"""
        profile = await self.repo.get_profile_by_handle(normalize_handle(handle))
        if not profile:
            raise NotFoundError(NO_PROFILE)
        return profile

    async def get_profile_by_user_id(self, user_id: str) -> Profile:
        profile = await self.repo.get_profile_by_user_id(user_id)
        if not profile:
            raise NotFoundError(NO_PROFILE)
        return profile

    async def list_profiles(self) -> List[Profile]:
        # 沒有資料時回傳空列表，不是 404
        return await self.repo.list_profiles()

    # --- 建立 / 更新 ---
    async def upsert_my_profile(self, user: User, profile_data: ProfileUpsert) -> Profile:
        """
        業務邏輯：合併前端送來的欄位到自己的 Profile，不存在則建立。

        1. 只處理有傳入的欄位 (exclude_unset=True)
        2. handle 若被其他使用者使用 -> 400
        3. 寫入時撞到唯一索引，一樣回報 handle 重複 (唯一索引才是最終保證)
        """
        # rollback 會讓 session 內所有物件過期，先記下 user_id
        user_id = user.user_id
        fields = build_profile_fields(profile_data.model_dump(exclude_unset=True))
        handle = fields.get("handle")

        profile = await self.repo.get_profile_by_user_id(user_id)
        if profile is None and not handle:
            raise ValidationError({"handle": "Profile handle is required"})

        # 快速檢查 (非最終保證)
        if handle and await self.repo.find_handle_owner(handle, user_id):
            logger.info("Handle %r already taken, rejected for user %s", handle, user_id)
            raise ConflictError(HANDLE_TAKEN)

        try:
            if profile is None:
                await self.repo.create_profile(user_id, fields)
                logger.info("Profile created for user %s", user_id)
            else:
                await self.repo.update_profile(profile, fields)
                logger.info("Profile updated for user %s", user_id)
        except IntegrityError:
            await self.db.rollback()
            # 兩個請求同時搶同一個 handle 時，由唯一索引擋下後到的那一個
            if handle and await self.repo.find_handle_owner(handle, user_id):
                logger.info("Handle %r claimed concurrently, rejected for user %s", handle, user_id)
                raise ConflictError(HANDLE_TAKEN)
            raise

        # 重新查詢一次，取得含擁有者 name/avatar 的完整資料
        return await self.repo.get_profile_by_user_id(user_id)

    # --- Experience / Education ---
    async def _get_profile_for_update(self, user: User) -> Profile:
        profile = await self.repo.get_profile_by_user_id(user.user_id)
        if not profile:
            raise NotFoundError(PROFILE_NOT_FOUND)
        return profile

    async def add_experience(self, user: User, data: ExperienceCreate) -> Profile:
        profile = await self._get_profile_for_update(user)
        entry = await self.repo.add_experience(profile, data)
        logger.info("Experience %s added for user %s", entry.id, user.user_id)
        return await self.repo.get_profile_by_user_id(user.user_id)

    async def add_education(self, user: User, data: EducationCreate) -> Profile:
        profile = await self._get_profile_for_update(user)
        entry = await self.repo.add_education(profile, data)
        logger.info("Education %s added for user %s", entry.id, user.user_id)
        return await self.repo.get_profile_by_user_id(user.user_id)

    async def delete_experience(self, user: User, exp_id: str) -> Profile:
        profile = await self._get_profile_for_update(user)
        entry = next((item for item in profile.experience if item.id == exp_id), None)
        if entry is None:
            raise NotFoundError({"experience": "Experience not found"})

        await self.repo.remove_experience(profile, entry)
        logger.info("Experience %s deleted for user %s", exp_id, user.user_id)
        return await self.repo.get_profile_by_user_id(user.user_id)

    async def delete_education(self, user: User, edu_id: str) -> Profile:
        profile = await self._get_profile_for_update(user)
        entry = next((item for item in profile.education if item.id == edu_id), None)
        if entry is None:
            raise NotFoundError({"education": "Education not found"})

        await self.repo.remove_education(profile, entry)
        logger.info("Education %s deleted for user %s", edu_id, user.user_id)
        return await self.repo.get_profile_by_user_id(user.user_id)

    # --- 刪除 ---
    async def delete_my_profile(self, user: User, delete_account: bool = False) -> str:
        """
        刪除自己的 Profile；delete_account=True 時連帳號一起刪除。
        (注意) 帳號刪除失敗時 Profile 不會被還原
        """
        profile = await self.repo.get_profile_by_user_id(user.user_id)
        if profile:
            await self.repo.delete_profile(profile)
            logger.info("Profile deleted for user %s", user.user_id)

        if not delete_account:
            return "Profile deleted"

        await UserRepository(self.db).delete_user(user)
        logger.info("Account deleted for user %s", user.user_id)
        return "Profile and account deleted"
