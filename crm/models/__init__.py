from .base import Base
from .user import User
from .customer import Customer
