import enum

from sqlalchemy import Column, String, Boolean, Enum, SmallInteger
from sqlalchemy.orm import relationship
from .base import BaseModel


class LoginType(str, enum.Enum):
    NORMAL = "normal"
    SOCIAL = "social"


class User(BaseModel):
    __tablename__ = "tbl_user"

    fullname = Column(String(100), nullable=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    email = Column(String(100), unique=True, nullable=False, index=True)
    # Only normal-login accounts carry a password hash
    password = Column(String(255), nullable=True)
    country_code = Column(String(10), nullable=True)
    phone = Column(String(20), unique=True, nullable=True, index=True)
    profile_pic = Column(String(255), nullable=True)
    login_type = Column(
        Enum(LoginType, name="login_type", values_callable=lambda e: [m.value for m in e]),
        default=LoginType.NORMAL,
        nullable=False,
    )
    social_id = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)
    is_login = Column(Boolean, default=False, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    step = Column(SmallInteger, default=0, nullable=False)

    # Relationships - User OWNS these
    posts = relationship("Post", back_populates="author")
    comments = relationship("Comment", back_populates="author")
