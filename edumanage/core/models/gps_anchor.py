from sqlalchemy import Column, Date, Float, String

from edumanage.db.session import Base


class UserGpsAnchor(Base):
    """First location reading of a user on a given day."""

    __tablename__ = "user_gps_anchors"

    user_id = Column(String(255), primary_key=True)
    date = Column(Date, primary_key=True)
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
