from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base


class Alert(Base):
    """Append-only alert log, one row per accepted scan tick."""

    __tablename__ = "alerts"

    id: Mapped[int] = mapped_column(primary_key=True)
    token_address: Mapped[str] = mapped_column(Text, ForeignKey("tokens.address"))
    alert_type: Mapped[str] = mapped_column(String(30))
    message: Mapped[str | None] = mapped_column(Text)
    timestamp: Mapped[datetime] = mapped_column(DateTime)

    __table_args__ = (
        Index("idx_alert_timestamp", "timestamp"),
        Index("idx_alert_type", "alert_type"),
    )
