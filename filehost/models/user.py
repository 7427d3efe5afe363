from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
import uuid

from filehost.core.database import Base


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    username = Column(String(30), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String(10), nullable=False, default="user")  # admin, user

    created_at = Column(DateTime(timezone=True), server_default=func.now())
