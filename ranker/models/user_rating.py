"""Profile rating model — one score per (rater, rated user); self-rating allowed."""

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ranker.database import Base, utcnow


class UserRating(Base):
    __tablename__ = "user_ratings"
    __table_args__ = (
        UniqueConstraint("rated_user_id", "rater_user_id", name="uq_user_rating_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    rater_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rated_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    rater_user: Mapped["User"] = relationship("User", foreign_keys=[rater_user_id])  # noqa: F821
