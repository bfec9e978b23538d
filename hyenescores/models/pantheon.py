from datetime import datetime
from sqlalchemy import Integer, String, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column

from hyenescores.database import Base


class PantheonEntry(Base):
    """All-time aggregate per manager, not scoped to a season."""

    __tablename__ = "pantheon"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    manager_name: Mapped[str] = mapped_column(String, nullable=False, unique=True)
    total_points: Mapped[int] = mapped_column(Integer, default=0)
    titles: Mapped[int] = mapped_column(Integer, default=0)
    runner_ups: Mapped[int] = mapped_column(Integer, default=0)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
