# app/domain/errors.py
"""
Typowane bledy rdzenia koszyk/punkty.

Kazdy blad niesie krotki komunikat dla uzytkownika i flage retryable,
reszte (tekst w UI, ponowienie) decyduje wywolujacy.
"""


class CoreError(Exception):
    message = "Operacja nie powiodla sie"
    retryable = False

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class NotFound(CoreError):
    message = "Nie znaleziono zasobu"


class OutOfStock(CoreError):
    message = "Niewystarczajacy stan magazynowy"

    def __init__(self, product_id: int, requested: int, available: int):
        super().__init__(
            f"Niewystarczajacy stan produktu {product_id}: "
            f"zadano {requested}, dostepne {available}"
        )
        self.product_id = product_id
        self.requested = requested
        self.available = available


class InvalidQuantity(CoreError):
    message = "Ilosc musi byc wieksza niz 0"


class InvalidCode(CoreError):
    message = "Nieprawidlowy kod polecajacy"


class SelfReferral(InvalidCode):
    message = "Nie mozna polecic samego siebie"


class InsufficientPoints(CoreError):
    message = "Niewystarczajace saldo punktow"

    def __init__(self, balance: int, requested: int):
        super().__init__(
            f"Niewystarczajace saldo punktow: saldo {balance}, zadano {requested}"
        )
        self.balance = balance
        self.requested = requested


class ConcurrentModification(CoreError):
    message = "Konflikt wspolbieznosci - sprobuj ponownie"
    retryable = True


class StoreUnavailable(CoreError):
    message = "Magazyn danych jest niedostepny"
    retryable = True
