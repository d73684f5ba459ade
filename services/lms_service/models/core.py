"""Relational schema: users, library items, modules, module contents, enrollments.

Cascades (module -> contents -> enrollments) are performed by the workflow
code, children first, so deletes behave the same on every backend.
"""

from datetime import datetime
from typing import Optional

from libs.common.datetime_utils import utc_now
from libs.db.base import Base
from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship


class User(Base):
    """Platform account. ``trainee_id`` is the human-readable trainee code."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)

    # Plain text rather than an Enum column: rows with an unknown role must stay
    # readable so the dashboard can report them.
    role: Mapped[str] = mapped_column(String(20), index=True, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    trainee_id: Mapped[Optional[str]] = mapped_column(
        String(50), unique=True, nullable=True
    )
    profile_picture: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    modules: Mapped[list["Module"]] = relationship(
        "Module", back_populates="instructor"
    )

    def __repr__(self):
        return f"<User {self.email} ({self.role})>"


class AdminContent(Base):
    """Library item owned by the platform; copied into modules on attach."""

    __tablename__ = "admin_contents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    video_url: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )


class Module(Base):
    __tablename__ = "modules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    instructor_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    instructor: Mapped["User"] = relationship("User", back_populates="modules")
    contents: Mapped[list["InstructorContent"]] = relationship(
        "InstructorContent", back_populates="module"
    )


class InstructorContent(Base):
    """Independent copy of a library item (or ad-hoc content) inside a module."""

    __tablename__ = "instructor_contents"
    __table_args__ = (
        UniqueConstraint(
            "module_id", "admin_content_id", name="uq_instructor_contents_module_admin"
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    module_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("modules.id"), index=True, nullable=False
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(String(512), nullable=True)
    video: Mapped[Optional[str]] = mapped_column(String(1024), nullable=True)
    # Copied-from reference; not a live link, so no FK to keep library deletes free.
    admin_content_id: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )

    module: Mapped["Module"] = relationship("Module", back_populates="contents")


class Enrollment(Base):
    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("content_id", "trainee_id", name="uq_enrollments_content_trainee"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    content_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("instructor_contents.id"), index=True, nullable=False
    )
    trainee_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id"), index=True, nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=utc_now
    )
