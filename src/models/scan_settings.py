from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, func
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class ScanSettings(Base):
    """Effective policy of each scan session, recorded when the session starts."""

    __tablename__ = "scan_settings"

    id: Mapped[int] = mapped_column(primary_key=True)
    min_cap: Mapped[float | None] = mapped_column(Float)
    max_cap: Mapped[float | None] = mapped_column(Float)
    min_volume: Mapped[float | None] = mapped_column(Float)
    min_liquidity: Mapped[float | None] = mapped_column(Float)
    liquidity_locked: Mapped[bool] = mapped_column(Boolean)
    mint_disabled: Mapped[bool] = mapped_column(Boolean)
    freeze_disabled: Mapped[bool] = mapped_column(Boolean)
    top_holders_limit: Mapped[float | None] = mapped_column(Float)
    started_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())
