import enum
from sqlalchemy import Column, Integer, String, ForeignKey, Enum, JSON, BigInteger
from sqlalchemy.orm import relationship
from schoolhub.database import Base, TimestampMixin


class ContentType(str, enum.Enum):
    DOCUMENT = "DOCUMENT"
    VIDEO = "VIDEO"
    IMAGE = "IMAGE"
    PRESENTATION = "PRESENTATION"
    OTHER = "OTHER"


class ContentStatus(str, enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class Content(Base, TimestampMixin):
    __tablename__ = "content"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=True)
    content_type = Column(Enum(ContentType), nullable=False, default=ContentType.DOCUMENT)
    status = Column(Enum(ContentStatus), nullable=False, default=ContentStatus.DRAFT)
    subject_id = Column(Integer, ForeignKey("subject.id", ondelete="SET NULL"), nullable=True)
    grade_level = Column(String, nullable=True)
    tags = Column(JSON, nullable=True)  # list of strings
    file_name = Column(String, nullable=True)   # original upload name
    file_path = Column(String, nullable=True)   # relative to UPLOAD_DIR
    file_size = Column(BigInteger, nullable=True)
    mime_type = Column(String, nullable=True)
    created_by = Column(Integer, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)

    subject = relationship("Subject")
