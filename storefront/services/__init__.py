# Storefront services

from .backend import BackendClient, BackendError
from .notifications import SlackNotifier
from .orders import OrderService
from .custom_requests import CustomRequestService
from .uploads import UploadService

__all__ = [
    "BackendClient",
    "BackendError",
    "SlackNotifier",
    "OrderService",
    "CustomRequestService",
    "UploadService",
]
