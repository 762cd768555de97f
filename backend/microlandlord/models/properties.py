from sqlalchemy import Boolean, Column, Index, Integer, String

from microlandlord.core.db import Base
from microlandlord.models.mixins import TimestampMixin


class Property(TimestampMixin, Base):
    __tablename__ = "properties"
    __table_args__ = (
        Index("ix_properties_landlord_active", "landlord_id", "is_active"),
    )

    id = Column(Integer, primary_key=True, index=True)
    landlord_id = Column(String, nullable=False, index=True)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    description = Column(String, nullable=True)
    type = Column(String, nullable=False, default="lakas")
    is_active = Column(Boolean, nullable=False, default=True)
