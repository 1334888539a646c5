from payments_api.models.payment import PaymentRecord
from payments_api.models.registration import TournamentRegistration

__all__ = ["PaymentRecord", "TournamentRegistration"]
