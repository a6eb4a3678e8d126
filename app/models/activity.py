from sqlalchemy import Column, Text, Integer, String, Float, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship

from app.database import Base


class Activity(Base):
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    type = Column(String(50), nullable=False)
    start_time = Column(Text, nullable=False)  # ISO 8601
    end_time = Column(Text, nullable=False)
    distance = Column(Float, nullable=False)
    duration = Column(Float, nullable=False)
    avg_speed = Column(Float, nullable=False)
    max_speed = Column(Float, nullable=False)
    calories = Column(Float, nullable=True)
    description = Column(Text, nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="activities")
    locations = relationship(
        "Location",
        back_populates="activity",
        cascade="all, delete-orphan",
        order_by="Location.timestamp",
    )
    comments = relationship("Comment", back_populates="activity", cascade="all, delete-orphan")
    likes = relationship("Like", back_populates="activity", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_activities_user_start", "user_id", "start_time"),
    )

    def __repr__(self):
        return f"<Activity(id={self.id}, user_id={self.user_id}, type={self.type}, is_public={self.is_public})>"


class Location(Base):
    __tablename__ = "locations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    latitude = Column(Float, nullable=False)
    longitude = Column(Float, nullable=False)
    altitude = Column(Float, nullable=True)
    timestamp = Column(Text, nullable=False)
    accuracy = Column(Float, nullable=True)
    speed = Column(Float, nullable=True)

    activity = relationship("Activity", back_populates="locations")


class Comment(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=True)

    activity = relationship("Activity", back_populates="comments")
    user = relationship("User")

    def __repr__(self):
        return f"<Comment(id={self.id}, activity_id={self.activity_id}, user_id={self.user_id})>"


class Like(Base):
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, autoincrement=True)
    activity_id = Column(Integer, ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    created_at = Column(Text, nullable=False)

    activity = relationship("Activity", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_likes_activity_user"),
    )
