from sqlalchemy import Column, String, ForeignKey, DateTime, BigInteger, Boolean
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import uuid

from filehost.core.database import Base


class File(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = Column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    original_name = Column(String, nullable=False)
    # Name on disk, unique within the tenant folder
    current_name = Column(String, nullable=False)
    file_path = Column(String, nullable=False)
    file_type = Column(String, nullable=False)
    size = Column(BigInteger, nullable=False)

    is_public = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    application = relationship("Application", back_populates="files")
