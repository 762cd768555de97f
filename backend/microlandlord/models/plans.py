from sqlalchemy import Boolean, Column, Integer, String, JSON
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship

from microlandlord.core.db import Base
from microlandlord.models.mixins import TimestampMixin


JSON_TYPE = JSONB().with_variant(JSON, "sqlite")


class Plan(TimestampMixin, Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, nullable=False, unique=True, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    price_huf = Column(Integer, nullable=False, default=0)
    # NULL means unlimited properties.
    property_limit = Column(Integer, nullable=True)
    ai_enabled = Column(Boolean, nullable=False, default=False)
    # Extra feature keys granted on top of the static tier defaults.
    features_json = Column(JSON_TYPE, nullable=False, default=list)
    tier = Column(Integer, nullable=False, default=0)
    is_active = Column(Boolean, default=True, nullable=False, index=True)

    subscriptions = relationship("Subscription", back_populates="plan")
