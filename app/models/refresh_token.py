from sqlalchemy import Column, Text, Integer, ForeignKey
from sqlalchemy.orm import relationship

from app.database import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Одна активная сессия на пользователя
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True)
    token = Column(Text, nullable=False, unique=True)
    expires_at = Column(Text, nullable=False, index=True)  # UTC, format_utc
    created_at = Column(Text, nullable=False)

    # Relationships
    user = relationship("User", back_populates="refresh_token")

    def __repr__(self):
        return f"<RefreshToken(id={self.id}, user_id={self.user_id}, expires_at={self.expires_at})>"
