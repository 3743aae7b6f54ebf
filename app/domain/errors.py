# app/domain/errors.py


class NotFoundError(LookupError):
    """Dokument (produkt, rabat, zamowienie, pozycja koszyka) nie istnieje."""


class ValidationFailure(ValueError):
    """Niepoprawne dane wejsciowe, odrzucone przed jakimkolwiek zapisem."""


class StorageError(RuntimeError):
    """Blad lokalnego magazynu klucz/wartosc (koszyk, buy-now)."""


class StoreWriteError(RuntimeError):
    """Magazyn dokumentow odrzucil zapis. Bez ponawiania."""

    def __init__(self, message: str, collection: str):
        self.collection = collection
        super().__init__(message)
