from datetime import datetime

from sqlalchemy import Boolean, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class Token(Base):
    """A scanned token that passed the eligibility policy at least once.

    Keyed by address: re-detection updates the row in place and keeps
    ``first_detected``.
    """

    __tablename__ = "tokens"

    id: Mapped[int] = mapped_column(primary_key=True)
    address: Mapped[str] = mapped_column(Text, unique=True)
    name: Mapped[str] = mapped_column(Text)
    symbol: Mapped[str] = mapped_column(Text)

    # Market data at last detection
    market_cap: Mapped[float | None] = mapped_column(Float)
    volume_24h: Mapped[float | None] = mapped_column(Float)
    liquidity: Mapped[float | None] = mapped_column(Float)
    price_change_24h: Mapped[float | None] = mapped_column(Float)
    holders: Mapped[int | None] = mapped_column(Integer)

    # Security snapshot
    liquidity_locked: Mapped[bool] = mapped_column(Boolean, default=False)
    mint_disabled: Mapped[bool] = mapped_column(Boolean, default=False)
    freeze_disabled: Mapped[bool] = mapped_column(Boolean, default=False)
    top10_holders: Mapped[float | None] = mapped_column(Float)
    contract_age: Mapped[float | None] = mapped_column(Float)  # hours

    # Risk model output
    risk_score: Mapped[int] = mapped_column(Integer)
    risk_level: Mapped[str] = mapped_column(String(20))

    first_detected: Mapped[datetime] = mapped_column(DateTime)
    last_updated: Mapped[datetime] = mapped_column(DateTime)

    __table_args__ = (
        Index("idx_risk_level", "risk_level"),
        Index("idx_tokens_last_updated", "last_updated"),
    )
