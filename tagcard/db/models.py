"""SQLAlchemy models for profiles and everything hanging off them."""
from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.orm import relationship

from .session import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String(64), primary_key=True)
    public_id = Column(String(64), unique=True, index=True, nullable=False)
    full_name = Column(String(255), nullable=False)
    display_name = Column(String(255), nullable=True)
    avatar_url = Column(Text, nullable=True)
    job_title = Column(String(255), nullable=True)
    company = Column(String(255), nullable=True)
    short_bio = Column(Text, nullable=True)
    long_bio = Column(Text, nullable=True)
    email = Column(String(255), nullable=True)
    phone = Column(String(64), nullable=True)
    website = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    show_contact_info = Column(Boolean, default=True, nullable=False)
    show_social_links = Column(Boolean, default=True, nullable=False)
    visibility_preset = Column(String(32), nullable=True)
    view_count = Column(Integer, default=0, server_default="0", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    tags = relationship("Tag", back_populates="profile", cascade="all,delete-orphan")
    social_links = relationship("SocialLink", back_populates="profile", cascade="all,delete-orphan")
    views = relationship("ViewEvent", back_populates="profile", cascade="all,delete-orphan")


class Tag(Base):
    __tablename__ = "tags"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    name = Column(String(255), nullable=False)
    kind = Column(String(16), default="like", nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="tags")


class SocialLink(Base):
    __tablename__ = "social_links"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    platform = Column(String(64), nullable=False)
    url = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="social_links")


class ViewEvent(Base):
    __tablename__ = "profile_views"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(String(64), ForeignKey("profiles.id", ondelete="CASCADE"), index=True, nullable=False)
    referrer = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    viewed_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    profile = relationship("Profile", back_populates="views")


class RetiredPublicId(Base):
    __tablename__ = "retired_public_ids"

    public_id = Column(String(64), primary_key=True)
    retired_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
