"""File SQLAlchemy model

A file is an uploaded image waiting for, undergoing, or done with
transcription. ``file_path`` is an opaque reference to the stored asset.
"""

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from .base import Base


class File(Base):
    """File model tracking the transcription workflow.

    ``responsible_by`` is the transcriber who claimed the file. The database
    enforces that only pending files may lack one.
    """
    __tablename__ = "files"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'approval', 'completed', 'rejected')",
            name="ck_files_status"
        ),
        CheckConstraint(
            "responsible_by IS NOT NULL OR status = 'pending'",
            name="ck_files_claimed_has_owner"
        ),
        Index("ix_files_created_at", "created_at"),
        Index("ix_files_responsible_by", "responsible_by"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(100), nullable=False)
    source_ref = Column("file_path", Text, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    responsible_by = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=True)
    status = Column(Text, nullable=False, server_default="pending")
    transcription_text = Column("text", Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
    updated_at = Column(DateTime(timezone=True), nullable=False)

    # Relationships
    creator = relationship("User", foreign_keys=[created_by])
    responsible = relationship("User", foreign_keys=[responsible_by])

    def to_dict(self):
        """Convert file to dictionary representation"""
        return {
            "id": self.id,
            "title": self.title,
            "file_path": self.source_ref,
            "created_by": self.created_by,
            "responsible_by": self.responsible_by,
            "status": self.status,
            "text": self.transcription_text,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }
