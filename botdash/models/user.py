"""
User model for dashboard accounts.
"""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from botdash.database import Base


class UserModel(Base):
    """
    User table.

    Attributes:
        id: Primary key
        username: Unique login name
        password: Salted scrypt hash ("hash.salt")
        bots: Relationship to the user's bots (one-to-many)
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)

    # Relationships
    bots = relationship("BotModel", back_populates="owner", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<UserModel(id={self.id}, username='{self.username}')>"
