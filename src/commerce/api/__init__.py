from commerce.api.routes import store_router

__all__ = ["store_router"]
