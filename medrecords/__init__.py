"""
Medical Records API
CRUD service for patients, clinical notes and summaries with API-key rate limiting.
"""

__version__ = "1.0.0"
