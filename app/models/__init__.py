from app.models.user import User
from app.models.property import Property
from app.models.review import Review, LandlordResponse, ReviewHelpfulness, OWNED_TABLES
