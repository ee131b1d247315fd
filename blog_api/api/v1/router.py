from fastapi import APIRouter
from blog_api.api.v1.endpoints import users, posts, comments

# ============================================================
# Main API v1 Router
# ============================================================

api_router = APIRouter()

# Include user routes at /user
api_router.include_router(
    users.router,
    prefix="/user"
)

# Include post routes at /posts
api_router.include_router(
    posts.router,
    prefix="/posts"
)

# Include comment routes at /comments
api_router.include_router(
    comments.router,
    prefix="/comments"
)
