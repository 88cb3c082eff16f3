"""
NFS Scoring Engine - Persistence Models.

============================================================
PURPOSE
============================================================
ORM models for storing NFS calculations.

Enables:
- Calculation history per enterprise
- Retrieval of a single stored result
- Audit trail of the input snapshot behind every score

============================================================
MODELS
============================================================
1. Enterprise: Known enterprises (existence check target)
2. NfsCalculation: One scored request, input and result

============================================================
"""

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from sqlalchemy import (
    String,
    Float,
    DateTime,
    ForeignKey,
    Index,
    JSON,
)
from sqlalchemy.orm import relationship, Mapped, mapped_column

from database.engine import Base


def _new_id() -> str:
    return str(uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================
# ENTERPRISE MODEL
# ============================================================


class Enterprise(Base):
    """
    An enterprise that can be scored.

    Only the columns needed to validate references and to
    label results are kept here.
    """

    __tablename__ = "enterprises"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id,
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )

    credit_code: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        unique=True,
        comment="Unified social credit code",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    calculations: Mapped[List["NfsCalculation"]] = relationship(
        "NfsCalculation",
        back_populates="enterprise",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"Enterprise(id={self.id}, name={self.name})"


# ============================================================
# NFS CALCULATION MODEL
# ============================================================


class NfsCalculation(Base):
    """
    One stored NFS calculation.

    ============================================================
    WHAT IT STORES
    ============================================================
    - Input snapshot (camelCase request payload)
    - Result snapshot (score, grade, factors, recommendation)
    - Composite score and risk level as queryable columns
    - Status (COMPLETED)
    ============================================================
    """

    __tablename__ = "nfs_calculations"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=_new_id,
    )

    enterprise_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("enterprises.id", ondelete="CASCADE"),
        nullable=False,
    )

    input_data: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        comment="Request payload the score was computed from",
    )

    result_data: Mapped[Dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        comment="Score, grade, factors and recommendation",
    )

    score: Mapped[Optional[float]] = mapped_column(
        Float,
        nullable=True,
        comment="Composite score (0-100)",
    )

    risk_level: Mapped[Optional[str]] = mapped_column(
        String(20),
        nullable=True,
        comment="VERY_LOW, LOW, MEDIUM, HIGH, VERY_HIGH",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="COMPLETED",
    )

    engine_version: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="1.0.0",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=_utcnow,
    )

    enterprise: Mapped["Enterprise"] = relationship(
        "Enterprise",
        back_populates="calculations",
    )

    __table_args__ = (
        Index("ix_nfs_calculations_enterprise_created", "enterprise_id", "created_at"),
        Index("ix_nfs_calculations_risk_level", "risk_level"),
    )

    def to_dict(self, include_enterprise: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "id": self.id,
            "enterpriseId": self.enterprise_id,
            "inputData": self.input_data,
            "resultData": self.result_data,
            "score": self.score,
            "riskLevel": self.risk_level,
            "status": self.status,
            "engineVersion": self.engine_version,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
        if include_enterprise and self.enterprise is not None:
            payload["enterprise"] = {
                "id": self.enterprise.id,
                "name": self.enterprise.name,
                "creditCode": self.enterprise.credit_code,
            }
        return payload

    def __repr__(self) -> str:
        return (
            f"NfsCalculation("
            f"id={self.id}, "
            f"enterprise={self.enterprise_id}, "
            f"score={self.score}, "
            f"level={self.risk_level})"
        )
