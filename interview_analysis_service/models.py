from datetime import datetime
from enum import Enum

from sqlalchemy import Column, String, Integer, BigInteger, DateTime
from sqlalchemy.orm import declarative_base

Base = declarative_base()

class UploadStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

class UploadRecord(Base):
    __tablename__ = "upload_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    s3_key = Column(String, nullable=False, unique=True, index=True)
    bucket = Column(String, nullable=False)
    original_filename = Column(String, nullable=False)
    file_size = Column(BigInteger, nullable=False)
    content_type = Column(String, nullable=False)
    upload_status = Column(String, nullable=False, default=UploadStatus.COMPLETED.value)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<UploadRecord(id={self.id}, s3_key='{self.s3_key}', status='{self.upload_status}')>"
