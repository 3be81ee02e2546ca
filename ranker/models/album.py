"""Album and Track models — imported from the Spotify catalog."""

from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ranker.database import Base, utcnow


class Album(Base):
    __tablename__ = "albums"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    spotify_id: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    artist: Mapped[str] = mapped_column(String(300), nullable=False)
    image_url: Mapped[str] = mapped_column(String(500), default="")
    release_date: Mapped[Optional[str]] = mapped_column(String(20))

    added_by_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL")
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utcnow, server_default=func.now(), onupdate=utcnow
    )

    # ── Relationships (owned, removed with the album) ──
    tracks: Mapped[List["Track"]] = relationship(
        "Track",
        back_populates="album",
        cascade="all, delete-orphan",
        order_by="Track.number",
    )
    ratings: Mapped[List["Rating"]] = relationship(  # noqa: F821
        "Rating", back_populates="album", cascade="all, delete-orphan"
    )
    comments: Mapped[List["Comment"]] = relationship(  # noqa: F821
        "Comment", back_populates="album", cascade="all, delete-orphan"
    )


class Track(Base):
    __tablename__ = "tracks"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    album_id: Mapped[int] = mapped_column(
        ForeignKey("albums.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(300), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False)  # milliseconds
    number: Mapped[int] = mapped_column(Integer, nullable=False)

    album: Mapped["Album"] = relationship("Album", back_populates="tracks")
