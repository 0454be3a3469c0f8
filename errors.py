class ReceiptError(Exception):
    """ Base class for errors surfaced to API callers """
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ReceiptError):
    """ Raised when a submitted receipt payload is structurally malformed """
    status_code = 400


class NotFoundError(ReceiptError):
    """ Raised when a receipt id has no stored points """
    status_code = 404


class FieldParseError(ValueError):
    """ Raised when a single receipt field can't be parsed; never leaves the points calculator """
