from app.db.session import Base
from app.models.user import User
from app.models.property import Property
from app.models.review import Review, LandlordResponse, ReviewHelpfulness
