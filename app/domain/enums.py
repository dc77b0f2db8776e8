# app/domain/enums.py
from enum import Enum


class CartStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PointsCause(str, Enum):
    PURCHASE = "compra"
    REDEMPTION = "resgate"
    REFERRAL = "indicacao"
    PHYSICAL_STORE = "loja-fisica"
    SERVICE = "servico"
    MANUAL_ADJUSTMENT = "ajuste-manual"
    AUTO_ADJUSTMENT = "ajuste-automatico"


class ReferralStatus(str, Enum):
    """
    Maszyna stanow polecenia: pendente -> aprovado, dokladnie raz.
    """

    PENDING = "pendente"
    APPROVED = "aprovado"

    def approve(self) -> "ReferralStatus | None":
        #przejscie dozwolone tylko z pendente, poza tym None (no-op)
        if self is ReferralStatus.PENDING:
            return ReferralStatus.APPROVED
        return None


class OrderStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
