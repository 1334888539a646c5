"""
Payment Errors — Every failure the payments API reports to a caller.

Each error carries the HTTP status it surfaces with; main.py renders them as
{"success": false, "error": <message>}.
"""


class PaymentError(Exception):
    """Base class."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidRequest(PaymentError):
    """Caller-supplied data failed validation."""

    status_code = 400


class GatewayRejected(PaymentError):
    """Square refused the charge (declined card, bad token...)."""

    status_code = 400


class PersistenceFailure(PaymentError):
    pass


class UnexpectedFailure(PaymentError):
    pass


class GatewayUnavailable(Exception):
    """Square could not be reached or answered with a server error."""
