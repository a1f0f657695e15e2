"""
Bot model for Discord bot records.

Each bot belongs to a user. Deleting a bot removes its commands and
analytics with it.
"""

from sqlalchemy import Boolean, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from botdash.database import Base


class BotModel(Base):
    """
    Bot table.

    Attributes:
        id: Primary key
        user_id: Foreign key to owner user
        name: Bot display name
        token: Discord bot token (stored, never used to connect)
        is_active: Whether the bot is marked active
    """
    __tablename__ = "bots"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    token = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=False, nullable=False)

    # Relationships
    owner = relationship("UserModel", back_populates="bots")
    commands = relationship("CommandModel", back_populates="bot", cascade="all, delete-orphan")
    analytics = relationship("AnalyticsModel", back_populates="bot", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<BotModel(id={self.id}, name='{self.name}', user_id={self.user_id})>"
