"""Model registry — importing this module registers every table on Base.metadata."""
from app.activity.models import ActivityEvent
from app.sharing.models import ShareLink
from app.social_graph.models import Block, Follow
from app.users.models import User

__all__ = ["ActivityEvent", "Block", "Follow", "ShareLink", "User"]
