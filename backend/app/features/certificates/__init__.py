"""
Certificates module.

Usage:
    from app.features.certificates import CertificateService
"""

from .models import Certificate
from .schemas import CertificateCreate, CertificateResponse
from .repository import CertificateRepository
from .service import CertificateService

__all__ = [
    "Certificate",
    "CertificateCreate",
    "CertificateResponse",
    "CertificateRepository",
    "CertificateService",
]
