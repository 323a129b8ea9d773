# storefront/domain/errors.py


class ShopError(Exception):
    """Base for errors converted to a user-facing message at the router boundary."""

    status_code = 500

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class ValidationError(ShopError):
    """Malformed or incomplete user input."""

    status_code = 400


class AuthError(ShopError):
    """Missing credential, or one the Identity Gateway does not recognise."""

    status_code = 401


class NotFoundError(ShopError):
    status_code = 404


class BackendError(ShopError):
    """The relational store, the identity gateway or the cart cache call itself failed."""

    status_code = 500
