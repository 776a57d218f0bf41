"""
Bill Organizer Package

Renames scanned utility bills after their provider, date and payment method
and files them into a year/month folder hierarchy.
"""

__version__ = "1.0.0"
__author__ = "Bill Organizer Team"

from .core.file_service import FileService

__all__ = ['FileService']
