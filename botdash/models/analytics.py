"""
Analytics model for append-only bot metrics.

`timestamp` is kept as the string the client supplied; ordering is
done on the parsed value, not lexically.
"""

from sqlalchemy import JSON, Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from botdash.database import Base


class AnalyticsModel(Base):
    __tablename__ = "analytics"

    id = Column(Integer, primary_key=True, index=True)
    bot_id = Column(Integer, ForeignKey("bots.id", ondelete="CASCADE"), nullable=False, index=True)
    metrics = Column(JSON, nullable=False)
    timestamp = Column(String(64), nullable=False)

    bot = relationship("BotModel", back_populates="analytics")

    def __repr__(self):
        return f"<AnalyticsModel(id={self.id}, bot_id={self.bot_id}, timestamp='{self.timestamp}')>"
