"""Project (repo) model."""
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from clientdesk.common.database import Base


class Repo(Base):
    """Project that uploaded files are attached to.

    Managed outside this service; only read here.
    """
    __tablename__ = "repos"

    id = Column(Integer, primary_key=True, autoincrement=True)
    projectname = Column(String(255), nullable=False)

    # Relationships
    files = relationship("ProjectFile", back_populates="project", cascade="all, delete-orphan", passive_deletes=True)

    def __repr__(self):
        return f"<Repo(id={self.id}, projectname={self.projectname})>"
