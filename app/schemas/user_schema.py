# app/schemas/user_schema.py
from pydantic import BaseModel, EmailStr, Field, field_validator, ConfigDict
from typing import Optional

# 登入請求的格式
class UserLogin(BaseModel):
    email: EmailStr
    password: str

# Token 回應的格式
class Token(BaseModel):
    access_token: str
    token_type: str


# 註冊請求 Body
class UserCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=30)
    password2: str # 確認密碼

    @field_validator('name')
    @classmethod
    def strip_name(cls, v: str) -> str:
        if len(v.strip()) < 2:
            raise ValueError('Name must be between 2 and 30 characters')
        return v.strip()

    @field_validator('password2')
    @classmethod
    def passwords_match(cls, v: str, info) -> str:
        """
        驗證兩次輸入的密碼是否一致
        """
        if v != info.data.get('password'):
            raise ValueError('Passwords must match')
        return v

# 註冊/查詢使用者的安全回應 (不含密碼)
class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    email: EmailStr
    avatar: Optional[str] = None
