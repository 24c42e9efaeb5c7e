from .store import DataStore, Filter, Order, StoreClient, StoreError

__all__ = ["DataStore", "Filter", "Order", "StoreClient", "StoreError"]
