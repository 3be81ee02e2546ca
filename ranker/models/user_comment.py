"""Profile comment + upvote models.

``UserComment.votes`` is a counter kept in lockstep with the number of
``UserCommentVote`` rows pointing at the comment.
"""

from datetime import datetime
from typing import List

from sqlalchemy import DateTime, ForeignKey, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ranker.database import Base, utcnow

MAX_USER_COMMENT_LENGTH = 20


class UserComment(Base):
    __tablename__ = "user_comments"
    __table_args__ = (
        UniqueConstraint("rated_user_id", "rater_user_id", name="uq_user_comment_pair"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    content: Mapped[str] = mapped_column(String(MAX_USER_COMMENT_LENGTH), nullable=False)
    rater_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rated_user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    votes: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    rater_user: Mapped["User"] = relationship("User", foreign_keys=[rater_user_id])  # noqa: F821
    user_votes: Mapped[List["UserCommentVote"]] = relationship(
        "UserCommentVote", back_populates="user_comment", cascade="all, delete-orphan"
    )


class UserCommentVote(Base):
    __tablename__ = "user_comment_votes"
    __table_args__ = (
        UniqueConstraint("user_id", "user_comment_id", name="uq_vote_user_comment"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_comment_id: Mapped[int] = mapped_column(
        ForeignKey("user_comments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    value: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    user_comment: Mapped["UserComment"] = relationship(
        "UserComment", back_populates="user_votes"
    )
