"""
Modèle SQLAlchemy pour les utilisateurs.
L'unicité de l'email est insensible à la casse : vérifiée par le magasin avant insertion,
et garantie par l'index unique sur lower(email) en cas d'écritures concurrentes.
"""

from sqlalchemy import Column, Index, Integer, String, func

from portal.database import Base


class User(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    role = Column(String(20), nullable=False)  # admin, parent, teacher
    phone = Column(String(30), nullable=True)


Index("uq_users_email_lower", func.lower(User.email), unique=True)
