from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid

from filehost.core.database import Base


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(50), unique=True, nullable=False)
    api_key = Column(String(36), unique=True, nullable=False, index=True)
    folder_path = Column(String, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    files = relationship("File", back_populates="application", passive_deletes=True)
