# app/exceptions/__init__.py

from exceptions.domain_exceptions import (
    DomainException,
    BadRequestException,
    ConflictException,
    ValidationException,
)

__all__ = [
    'DomainException',
    'BadRequestException',
    'ConflictException',
    'ValidationException',
]
