from datetime import datetime
from sqlalchemy import Integer, String, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from hyenescores.database import Base


class Champion(Base):
    __tablename__ = "champions"
    __table_args__ = (
        UniqueConstraint("championship", "season", name="uq_champions_championship_season"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    championship: Mapped[str] = mapped_column(String, nullable=False)
    season: Mapped[int] = mapped_column(Integer, nullable=False)
    champion_name: Mapped[str] = mapped_column(String, nullable=False)
    runner_up_name: Mapped[str | None] = mapped_column(String)
    created_at: Mapped[datetime | None] = mapped_column(DateTime, server_default=func.now())
