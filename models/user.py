from models.base_model import Base, BaseModel
from sqlalchemy import Column, String


class User(BaseModel, Base):
    __tablename__ = "users"

    # phone number (7-15 digits) or email
    id = Column(String(255), primary_key=True)
    password_hash = Column(String(255), nullable=False)
