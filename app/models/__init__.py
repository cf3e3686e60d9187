"""
SQLModel table models - Database schema models.

For modifications:
1. Edit the appropriate model file in app/models/
2. Create an Alembic migration to reflect the changes
3. Use Alembic to manage all schema changes going forward
"""

from app.models.bookmark import Bookmarks
from app.models.category import Categories
from app.models.comment import Comments
from app.models.notification import Notifications
from app.models.post import Posts
from app.models.report import Reports
from app.models.upvote import CommentUpvotes, PostUpvotes
from app.models.user import Users

__all__ = [
    # Core entity models
    "Users",
    "Categories",
    "Posts",
    "Comments",
    # Junction/relationship tables
    "PostUpvotes",
    "CommentUpvotes",
    "Bookmarks",
    # Side-effect records
    "Notifications",
    "Reports",
]
