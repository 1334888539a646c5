from payments_api.routes.payment import router as payment_router

__all__ = ["payment_router"]
