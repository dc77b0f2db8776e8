# app/services/cart_consolidator.py
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.domain.enums import CartStatus
from app.domain.errors import StoreUnavailable
from app.repos.cart_repo import CartRepo
from app.utils.settings import CART_SCAN_LIMIT
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartConsolidator:
    """
    Jeden aktywny koszyk na uzytkownika, przywracany przy kazdym odczycie.

    Kilka aktywnych koszykow (rownolegle sciezki tworzenia) jest scalanych
    do najnowszego: linie przenoszone regula scalania (suma ilosci po product_id),
    stary koszyk -> inactive. Drugie wywolanie to no-op.

    Nie bierze locka uzytkownika - wywolujacy (CartService) juz go trzyma.
    """

    def __init__(self, db: Session, scan_limit: int = CART_SCAN_LIMIT):
        self.repo = CartRepo(db)
        self.scan_limit = scan_limit

    def ensure_single_active_cart(self, user_id: int) -> CartModel:
        carts = self.repo.list_active_carts(user_id, limit=self.scan_limit)

        if not carts:
            created = self.repo.create_cart(user_id)
            logger.info(f"Utworzono nowy koszyk {created.id} dla uzytkownika {user_id}")
            return created

        primary = carts[0]
        if len(carts) == 1:
            return primary

        stale = carts[1:]
        logger.info(
            f"Uzytkownik {user_id} ma {len(carts)} aktywnych koszykow, "
            f"scalam do {primary.id}"
        )

        merged = 0
        for cart in stale:
            #kazdy stary koszyk osobno - blad jednego nie blokuje reszty
            try:
                self._merge_into(cart, primary)
                merged += 1
            except StoreUnavailable as e:
                self.repo.rollback()
                logger.warning(
                    f"Scalanie koszyka {cart.id} do {primary.id} nie powiodlo sie, "
                    f"zostaje na nastepne wywolanie: {e}"
                )

        logger.info(f"Scalono {merged}/{len(stale)} koszykow do {primary.id}")
        return primary

    def _merge_into(self, source: CartModel, target: CartModel) -> None:
        lines = self.repo.get_cart_items(source.id)

        for line in lines:
            self.repo.merge_line(
                cart_id=target.id,
                product_id=line.product_id,
                quantity=line.quantity,
                price=line.price,
            )

        self.repo.delete_lines([line.id for line in lines])
        self.repo.bump_version(target.id)
        self.repo.set_cart_status(source.id, CartStatus.INACTIVE)
        self.repo.commit()

        logger.info(f"Przeniesiono {len(lines)} linii z koszyka {source.id} do {target.id}")
