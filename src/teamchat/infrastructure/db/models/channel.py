from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, ForeignKey, Index, Integer, String, UniqueConstraint, text
from sqlalchemy.dialects.postgresql import TIMESTAMP, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from teamchat.infrastructure.db.base import Base


class ChannelModel(Base):
    __tablename__ = "channels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    icon_codepoint: Mapped[int | None] = mapped_column(Integer, nullable=True)
    icon_color: Mapped[str | None] = mapped_column(String(16), nullable=True)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    created_by: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
    )
    updated_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        server_default=text("now()"),
        onupdate=text("now()"),
    )

    __mapper_args__ = {"eager_defaults": True}

    visibility = relationship(
        "ChannelRoleVisibilityModel", back_populates="channel", lazy="noload"
    )

    __table_args__ = (
        Index("ix_channels_active_created", "is_active", "created_at"),
    )


class ChannelRoleVisibilityModel(Base):
    __tablename__ = "channel_role_visibility"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    channel_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("channels.id", ondelete="CASCADE"),
        nullable=False,
    )
    role_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
    )

    channel = relationship("ChannelModel", back_populates="visibility")

    __table_args__ = (
        UniqueConstraint("channel_id", "role_id", name="uq_channel_role_visibility"),
        Index("ix_channel_role_visibility_role", "role_id", "channel_id"),
    )
