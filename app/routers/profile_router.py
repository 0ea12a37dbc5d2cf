# app/routers/profile_router.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.database import get_db
from app.core.security import get_current_user
from app.models.user import User
from app.services.profile_service import ProfileService
from app.schemas.profile_schema import (
    ProfileUpsert, ProfileOut, ExperienceCreate, EducationCreate, MessageOut
)
from typing import List

import logging

logger = logging.getLogger(__name__)

# (注意) 這個 router 同時有公開與需登入的 API，
# 所以不使用全局的 get_current_user 依賴，改在各端點個別宣告
router = APIRouter(
    prefix="/api/profile",
    tags=["Profiles"]
)

@router.get("/test")
async def test_profile_route():
    """測試 profile 路由是否正常"""
    return {"msg": "Profile works"}

@router.get("", response_model=ProfileOut)
async def get_my_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    獲取當前登入者的 Profile。
    尚未建立時回傳 404 {noprofile}。
    """
    service = ProfileService(db)
    return await service.get_my_profile(current_user)

@router.get("/all", response_model=List[ProfileOut])
async def list_profiles(db: AsyncSession = Depends(get_db)):
    """
    (公開) 獲取所有 Profile，沒有資料時回傳空陣列
    """
    service = ProfileService(db)
    return await service.list_profiles()

@router.get("/handle/{handle}", response_model=ProfileOut)
async def get_profile_by_handle(
    handle: str,
    db: AsyncSession = Depends(get_db)
):
    """
    (公開) 依 handle 獲取 Profile (不分大小寫)
    """
    service = ProfileService(db)
    return await service.get_profile_by_handle(handle)

@router.get("/user/{user_id}", response_model=ProfileOut)
async def get_profile_by_user_id(
    user_id: str,
    db: AsyncSession = Depends(get_db)
):
    """
    (公開) 依 User ID 獲取 Profile
    """
    service = ProfileService(db)
    return await service.get_profile_by_user_id(user_id)

@router.post("", response_model=ProfileOut)
async def upsert_my_profile(
    profile_data: ProfileUpsert,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    建立或更新當前登入者的 Profile。
    只會覆蓋有傳入的欄位；social 每次都依傳入的欄位重新建立。
    """
    service = ProfileService(db)
    return await service.upsert_my_profile(current_user, profile_data)

@router.post("/experience", response_model=ProfileOut)
async def add_experience(
    experience_data: ExperienceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    新增一筆工作經歷 (排在最前面)
    """
    service = ProfileService(db)
    return await service.add_experience(current_user, experience_data)

@router.post("/education", response_model=ProfileOut)
async def add_education(
    education_data: EducationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    新增一筆學歷 (排在最前面)
    """
    service = ProfileService(db)
    return await service.add_education(current_user, education_data)

@router.delete("/experience/{exp_id}", response_model=ProfileOut)
async def delete_experience(
    exp_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ProfileService(db)
    return await service.delete_experience(current_user, exp_id)

@router.delete("/education/{edu_id}", response_model=ProfileOut)
async def delete_education(
    edu_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    service = ProfileService(db)
    return await service.delete_education(current_user, edu_id)

@router.delete("", response_model=MessageOut)
async def delete_my_profile(
    delete_account: bool = False,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    刪除當前登入者的 Profile (保留帳號，可再次登入)。
    `?delete_account=true` 時連帳號一起刪除。
    """
    service = ProfileService(db)
    message = await service.delete_my_profile(current_user, delete_account=delete_account)
    return {"msg": message}
