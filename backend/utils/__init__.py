"""
Utility functions
"""
from .id_generator import generate_user_id, generate_content_id, validate_id

__all__ = ['generate_user_id', 'generate_content_id', 'validate_id']
