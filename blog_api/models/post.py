from sqlalchemy import Column, String, Boolean, ForeignKey, Integer, Text
from sqlalchemy.orm import relationship
from .base import BaseModel


class Post(BaseModel):
    __tablename__ = "tbl_posts"

    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String(255), nullable=True)
    author_id = Column(Integer, ForeignKey("tbl_user.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("tbl_categories.id"), nullable=True, index=True)
    is_active = Column(Boolean, default=True, nullable=False)
    # Soft-delete flag; hard delete removes the row
    is_deleted = Column(Boolean, default=False, nullable=False, index=True)

    # Relationships
    author = relationship("User", back_populates="posts")
    category = relationship("Category", back_populates="posts")
    # Left to the database (ON DELETE CASCADE) so a hard delete never loads comments
    comments = relationship("Comment", back_populates="post", passive_deletes=True)
