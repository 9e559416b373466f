"""Chama domain exports"""

from .exceptions import ChamaError, ChamaNotFoundError, ChamaUnavailableError
from .models import ALREADY_PURCHASED, Chama, ChamaMember, ChamaPurchase
from .service import ChamaService

__all__ = [
    "ALREADY_PURCHASED",
    "Chama",
    "ChamaError",
    "ChamaMember",
    "ChamaNotFoundError",
    "ChamaPurchase",
    "ChamaService",
    "ChamaUnavailableError",
]
