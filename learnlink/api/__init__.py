"""
LearnLink REST API access, grouped the way the backend groups its routes.
"""

from learnlink.api.client import APIResponse, ApiClient, resolve_image_url

__all__ = ["APIResponse", "ApiClient", "resolve_image_url"]
