# app/services/order_service.py
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.domain.enums import OrderStatus, PointsCause
from app.domain.errors import InvalidQuantity, NotFound
from app.domain.schemas import OrderOut
from app.repos.order_repo import OrderRepo
from app.services.cart_service import CartService
from app.services.notification_service import NotificationService
from app.services.points_ledger import PointsLedger
from app.services.referral_service import ReferralService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Serwis odpowiedzialny za domenę zamówień: checkout z aktywnego koszyka
    i potwierdzenie zakupu (punkty compra + zatwierdzenie polecenia).
    Płatności poza zakresem.
    """

    def __init__(
        self,
        db: Session,
        cart_service: CartService,
        ledger: PointsLedger,
        notification_service: NotificationService | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_service = cart_service
        self.ledger = ledger
        self.referrals = ReferralService(db, ledger)
        self.notification_service = notification_service or NotificationService()

    def checkout(self, user_id: int) -> OrderOut:
        """
        Use Case: Tworzenie zamówienia z aktywnego koszyka.

        1. Konsoliduje koszyki i liczy podsumowanie
        2. Tworzy zamówienie PENDING
        3. Dezaktywuje koszyk (CAS na wersji, razem z zamówieniem)
        """
        cart_service = self.cart_service
        with cart_service.lock_service.user_lock(user_id):
            cart = cart_service.consolidator.ensure_single_active_cart(user_id)
            #podsumowanie zamowienia nie moze pominac produktu (punkty, dostawa)
            view = cart_service.build_view(cart, strict=True)

            if not view.items:
                raise InvalidQuantity("Koszyk jest pusty")

            order = self.repo.create_order(
                OrderModel(
                    cart_id=cart.id,
                    user_id=user_id,
                    status=OrderStatus.PENDING.value,
                    subtotal=view.summary.subtotal,
                    shipping=view.summary.shipping,
                    total=view.summary.total,
                    points=view.summary.total_points,
                )
            )
            # commit zamowienia tylko gdy koszyk nie zmienil sie w miedzyczasie
            cart_service.deactivate_cart(cart)

        logger.info(f"Order {order.id} created from cart {cart.id}")
        return OrderOut.model_validate(order)

    def confirm_order(self, order_id: int) -> OrderOut:
        """
        Use Case: Potwierdzenie zakupu.

        Powtórka jest bezpieczna: status PENDING -> CONFIRMED tylko raz,
        a wpisy w księdze mają reference_id zamówienia.
        """
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound(f"Zamówienie {order_id} nie istnieje")

        if self.repo.mark_confirmed(order_id):
            self.repo.commit()
            logger.info(f"Order {order_id} confirmed")

        if order.points > 0:
            result = self.ledger.record_transaction(
                order.user_id,
                order.points,
                PointsCause.PURCHASE,
                reference_id=f"order:{order.id}",
                description=f"Punkty za zamówienie {order.id}",
            )
            if result.created:
                self.notification_service.send_points_notification(
                    order.user_id, order.points, PointsCause.PURCHASE.value
                )

        self.referrals.approve_referral(order.user_id)
        return OrderOut.model_validate(order)

    def get_order(self, order_id: int, user_id: int) -> OrderOut:
        """
        Use Case: Pobranie zamówienia (Query).
        """
        order = self.repo.get_order(order_id)

        if not order:
            raise NotFound(f"Zamówienie {order_id} nie istnieje")

        if order.user_id != user_id:
            raise PermissionError("Brak dostępu do zamówienia")

        return OrderOut.model_validate(order)
