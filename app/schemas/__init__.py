"""
Pydantic schemas for API responses and requests
"""
from app.schemas.category import CategoryCreate, CategoryResponse
from app.schemas.comment import CommentCreate, CommentNode, CommentResponse
from app.schemas.common import CategorySummary, MessageResponse, SuccessResponse, UserSummary
from app.schemas.notification import NotificationListResponse, NotificationResponse
from app.schemas.post import (
    PinResponse,
    PostCreate,
    PostDetailResponse,
    PostListResponse,
    PostResponse,
    PostUpdate,
    SolveResponse,
    UpvoteResponse,
    UserPostsResponse,
)
from app.schemas.report import ReportCreate, ReportListItem, ReportResponse
from app.schemas.user import BookmarkToggleResponse, UserProfileUpdate, UserResponse

__all__ = [
    "BookmarkToggleResponse",
    "CategoryCreate",
    "CategoryResponse",
    "CategorySummary",
    "CommentCreate",
    "CommentNode",
    "CommentResponse",
    "MessageResponse",
    "NotificationListResponse",
    "NotificationResponse",
    "PinResponse",
    "PostCreate",
    "PostDetailResponse",
    "PostListResponse",
    "PostResponse",
    "PostUpdate",
    "ReportCreate",
    "ReportListItem",
    "ReportResponse",
    "SolveResponse",
    "SuccessResponse",
    "UpvoteResponse",
    "UserPostsResponse",
    "UserProfileUpdate",
    "UserResponse",
    "UserSummary",
]
