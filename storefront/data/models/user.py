from sqlalchemy import Column, Integer, String
from storefront.data.database import Base


class UserModel(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, unique=True)
    role = Column(String, nullable=False, default="user")

    #adres wysylki, miasto i kod pocztowy wymagane przy zamowieniu
    address_line1 = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True)

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
