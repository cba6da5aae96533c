"""
Schémas Pydantic pour les menus de la cantine (un menu par jour).
"""

import datetime as dt
from typing import Optional

from pydantic import BaseModel


class MenuCreate(BaseModel):
    date: dt.date
    starter: str = ""
    main_course: str
    dessert: str = ""
    snack: str = ""  # Goûter
    photo_url: Optional[str] = None


class MenuResponse(BaseModel):
    id: int
    date: dt.date
    starter: str
    main_course: str
    dessert: str
    snack: str
    photo_url: Optional[str] = None

    model_config = {"from_attributes": True}
