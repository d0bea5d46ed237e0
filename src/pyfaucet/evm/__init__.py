from .client import AsyncEVMClient, SyncEVMClient

__all__ = ["SyncEVMClient", "AsyncEVMClient"]
