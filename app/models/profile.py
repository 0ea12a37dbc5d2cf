# app/models/profile.py
from sqlalchemy import Column, String, TEXT, ForeignKey, JSON, CHAR, Date, Boolean, INT, TIMESTAMP, func
from sqlalchemy.orm import relationship, validates
from app.core.database import Base

class Profile(Base):
    __tablename__ = "profiles"
    profile_id = Column(CHAR(36), primary_key=True)
    user_id = Column(CHAR(36), ForeignKey("users.user_id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    # (重要) handle 的唯一索引是防止重複 handle 的最後防線
    handle = Column(String(40), unique=True, nullable=False, index=True)
    company = Column(String(255))
    website = Column(String(500))
    location = Column(String(255))
    status = Column(String(255), nullable=False)
    skills = Column(JSON, default=list)
    bio = Column(TEXT)
    githubusername = Column(String(100))
    social = Column(JSON, default=dict)
    created_at = Column(TIMESTAMP, server_default=func.now())

    user = relationship("User", back_populates="profile", lazy="selectin")

    # 最新加入的排在最前面
    experience = relationship(
        "Experience",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="Experience.position.desc()",
        lazy="selectin"
    )
    education = relationship(
        "Education",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="Education.position.desc()",
        lazy="selectin"
    )

    @validates("handle")
    def _normalize_handle(self, key, value):
        # 存入前一律 trim + 小寫
        return value.strip().lower() if isinstance(value, str) else value


class Experience(Base):
    __tablename__ = "profile_experience"
    id = Column(CHAR(36), primary_key=True)
    profile_id = Column(CHAR(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    # 同一個 Profile 內的插入順序
    position = Column(INT, nullable=False, default=0)
    title = Column(String(255), nullable=False)
    company = Column(String(255), nullable=False)
    location = Column(String(255))
    from_date = Column(Date, nullable=False)
    to_date = Column(Date)
    current = Column(Boolean, default=False, nullable=False)
    description = Column(TEXT)

    profile = relationship("Profile", back_populates="experience")


class Education(Base):
    __tablename__ = "profile_education"
    id = Column(CHAR(36), primary_key=True)
    profile_id = Column(CHAR(36), ForeignKey("profiles.profile_id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(INT, nullable=False, default=0)
    school = Column(String(255), nullable=False)
    degree = Column(String(255), nullable=False)
    fieldofstudy = Column(String(255), nullable=False)
    from_date = Column(Date, nullable=False)
    to_date = Column(Date)
    current = Column(Boolean, default=False, nullable=False)
    description = Column(TEXT)

    profile = relationship("Profile", back_populates="education")
