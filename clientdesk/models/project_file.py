"""Project file model."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, text
from sqlalchemy.orm import relationship
from clientdesk.common.database import Base


class ProjectFile(Base):
    """Metadata for a file uploaded to a project."""
    __tablename__ = "project_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("repos.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    file_name = Column(String(300), nullable=False)  # Generated name on disk
    original_name = Column(String(255), nullable=False)  # Display / download name
    uploaded_at = Column(DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP"))

    # Relationships
    project = relationship("Repo", back_populates="files")
    user = relationship("User", back_populates="project_files")

    def __repr__(self):
        return f"<ProjectFile(id={self.id}, original_name={self.original_name})>"
