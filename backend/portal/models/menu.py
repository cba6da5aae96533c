"""
Modèle SQLAlchemy pour les menus de la cantine.
"""

from sqlalchemy import Column, Date, Integer, String

from portal.database import Base


class DailyMenu(Base):
    __tablename__ = "daily_menus"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(Date, unique=True, nullable=False)
    starter = Column(String(255), nullable=False, default="")
    main_course = Column(String(255), nullable=False)
    dessert = Column(String(255), nullable=False, default="")
    snack = Column(String(255), nullable=False, default="")
    photo_url = Column(String(500), nullable=True)
