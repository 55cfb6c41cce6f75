from sqlalchemy import Column, Integer, Text
from .db import Base


class Recipe(Base):
    __tablename__ = "recipes"
    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    title = Column(Text, nullable=False)
    ingredients = Column(Text, nullable=False)  # comma-separated
    steps = Column(Text, nullable=False)
    cooking_time_minutes = Column(Integer, nullable=False)
    dietary_tags = Column(Text, nullable=True)  # e.g. "vegetarian,gluten-free"

    def __repr__(self):
        return f"<Recipe id={self.id} title={self.title!r}>"
