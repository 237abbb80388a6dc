"""Content page model."""
from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from intranet.db.base import Base
from intranet.models.mixins import TimestampMixin


class Page(TimestampMixin, Base):
    """A markdown content page addressed by its URL slug."""

    __tablename__ = "pages"

    id: Mapped[str] = mapped_column(String(120), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")
