"""HTTP interface to the morphology engine."""

from .main import create_app

__all__ = ['create_app']
