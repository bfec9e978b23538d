from datetime import datetime
from sqlalchemy import Integer, String, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from hyenescores.database import Base
from hyenescores.models.sql_types import STANDINGS_SQL_TYPE


class Season(Base):
    __tablename__ = "seasons"
    __table_args__ = (
        UniqueConstraint("championship", "season_number", name="uq_seasons_championship_number"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    championship: Mapped[str] = mapped_column(String, nullable=False)
    season_number: Mapped[int] = mapped_column(Integer, nullable=False)
    standings: Mapped[list | dict | None] = mapped_column(STANDINGS_SQL_TYPE, default=list)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime, server_default=func.now(), onupdate=func.now()
    )
