from sqlalchemy import Column, Text, Integer, String, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base

PENDING = "PENDING"
ACCEPTED = "ACCEPTED"
REJECTED = "REJECTED"


class Friend(Base):
    """Заявка в друзья: requester -> target.

    user_low_id/user_high_id хранят неупорядоченную пару, уникальность
    которой гарантирует БД.
    """

    __tablename__ = "friends"

    id = Column(Integer, primary_key=True, autoincrement=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    target_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user_low_id = Column(Integer, nullable=False)
    user_high_id = Column(Integer, nullable=False)
    status = Column(String(16), nullable=False, default=PENDING)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)

    # Relationships
    requester = relationship("User", foreign_keys=[requester_id])
    target = relationship("User", foreign_keys=[target_id])

    __table_args__ = (
        UniqueConstraint("user_low_id", "user_high_id", name="uq_friends_pair"),
        Index("idx_friends_target_status", "target_id", "status"),
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.requester_id is not None and self.target_id is not None:
            self.user_low_id = min(self.requester_id, self.target_id)
            self.user_high_id = max(self.requester_id, self.target_id)

    def __repr__(self):
        return f"<Friend(id={self.id}, requester_id={self.requester_id}, target_id={self.target_id}, status={self.status})>"
