"""
Command model for per-bot command definitions.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from botdash.database import Base


class CommandModel(Base):
    __tablename__ = "commands"

    id = Column(Integer, primary_key=True, index=True)
    bot_id = Column(Integer, ForeignKey("bots.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    code = Column(Text, nullable=False)

    bot = relationship("BotModel", back_populates="commands")

    def __repr__(self):
        return f"<CommandModel(id={self.id}, name='{self.name}', bot_id={self.bot_id})>"
