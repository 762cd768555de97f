from sqlalchemy import Boolean, Column, Integer, String, UniqueConstraint

from microlandlord.core.db import Base
from microlandlord.models.mixins import TimestampMixin


class FeatureEntitlement(TimestampMixin, Base):
    """Per-account feature override that sits above the plan matrix."""

    __tablename__ = "entitlements"
    __table_args__ = (
        UniqueConstraint("account_id", "feature", name="uq_entitlement_account_feature"),
    )

    id = Column(Integer, primary_key=True, index=True)
    account_id = Column(String, nullable=False, index=True)
    feature = Column(String, nullable=False)
    enabled = Column(Boolean, nullable=False, default=False)
    source = Column(String, nullable=False, default="manual_override")
