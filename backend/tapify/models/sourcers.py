from sqlalchemy import Column, Integer, String

from tapify.core.db import Base
from tapify.models.mixins import TimestampMixin


class SourcerAccount(TimestampMixin, Base):
    __tablename__ = "sourcer_accounts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
