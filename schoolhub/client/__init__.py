from .api_client import SchoolClient, ClientSession, UserProfile, ApiError
