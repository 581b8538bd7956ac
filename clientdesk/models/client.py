"""Client model."""
from sqlalchemy import Column, Integer, String
from clientdesk.common.database import Base


class Client(Base):
    """Business client.

    name and cif are not unique at the schema level: uniqueness is only
    checked when a client is updated.
    """
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    cif = Column(String(50), nullable=False, index=True)  # Tax identifier
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    web = Column(String(255), nullable=True)

    def __repr__(self):
        return f"<Client(id={self.id}, name={self.name}, cif={self.cif})>"
