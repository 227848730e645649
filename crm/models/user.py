from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from crm.models.base import Base


class User(Base):
    __tablename__ = "user"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String, unique=True, nullable=False)
    password = Column(String, nullable=False)  # bcrypt hash, never plaintext
    role = Column(String, nullable=False, default="user", server_default="user")

    customers = relationship("Customer", back_populates="owner")
