from sqlalchemy import Column, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from .base import BaseModel


class Comment(BaseModel):
    __tablename__ = "tbl_comments"

    comment = Column(Text, nullable=False)
    post_id = Column(Integer, ForeignKey("tbl_posts.id", ondelete="CASCADE"), nullable=False, index=True)
    author_id = Column(Integer, ForeignKey("tbl_user.id"), nullable=True, index=True)

    # Relationships
    post = relationship("Post", back_populates="comments")
    author = relationship("User", back_populates="comments")
