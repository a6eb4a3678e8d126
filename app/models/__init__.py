from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.friend import Friend
from app.models.activity import Activity, Location, Comment, Like

__all__ = ["User", "RefreshToken", "Friend", "Activity", "Location", "Comment", "Like"]
