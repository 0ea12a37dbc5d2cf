# models/user.py
from sqlalchemy import Column, String, CHAR, TIMESTAMP, func
from app.core.database import Base
from sqlalchemy.orm import relationship

class User(Base):
    __tablename__ = "users"

    # 基本欄位
    user_id = Column(CHAR(36), primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    avatar = Column(String(500))
    created_at = Column(TIMESTAMP, server_default=func.now())

    # 1-to-1 關聯：刪除帳號時一併刪除 Profile
    profile = relationship(
        "Profile", # <-- 使用字串
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan"
    )
