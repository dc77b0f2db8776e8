#import wszystkich modeli zeby SQLAlchemy je zarejestrowal w base metadata

from app.data.models.profile import ProfileModel
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.order import OrderModel
from app.data.models.points_transaction import PointsTransactionModel
from app.data.models.referral import ReferralModel

__all__ = [
    "ProfileModel",
    "CartModel",
    "CartItemModel",
    "OrderModel",
    "PointsTransactionModel",
    "ReferralModel",
]
