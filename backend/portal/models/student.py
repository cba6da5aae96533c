"""
Modèle SQLAlchemy pour la table students.
Un parent référencé ne peut pas être supprimé tant que l'élève n'est pas réassigné (RESTRICT).
"""

from sqlalchemy import Boolean, Column, Date, ForeignKey, Integer, String

from portal.database import Base


class Student(Base):
    __tablename__ = "students"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    last_name = Column(String(100), nullable=False)
    first_name = Column(String(100), nullable=False)
    birth_date = Column(Date, nullable=False)
    class_label = Column(String(50), nullable=False, index=True)
    school_level = Column(String(50), nullable=True)
    parent_id = Column(Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    is_archived = Column(Boolean, nullable=False, default=False)
    photo_url = Column(String(500), nullable=True)
