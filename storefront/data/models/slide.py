from sqlalchemy import Column, Integer, String

from storefront.data.database import Base


class SlideModel(Base):
    __tablename__ = "slides"

    id = Column(Integer, primary_key=True)
    image_url = Column(String, nullable=False)
    title = Column(String, nullable=True)
    caption = Column(String, nullable=True)
    link = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)
