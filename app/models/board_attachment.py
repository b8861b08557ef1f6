"""
게시판 첨부파일 모델
"""
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey
from sqlalchemy.orm import relationship

from .base import Base


class Attachment(Base):
    """게시글 첨부파일 모델"""
    __tablename__ = "attachments"

    id = Column(Integer, primary_key=True, index=True)

    # 게시글 참조
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True, comment="게시글 ID")

    # 파일 정보
    filename_original = Column(String(255), nullable=False, comment="파일 원본 이름")
    file_url = Column(String(1000), nullable=False, comment="파일 URL")
    file_size = Column(Integer, nullable=False, default=0, comment="파일 크기(bytes)")
    mime_type = Column(String(100), nullable=True, comment="MIME 타입")
    is_image = Column(Boolean, default=False, nullable=False, comment="이미지 여부")
    display_order = Column(Integer, default=0, nullable=False, comment="표시 순서")

    # 관계
    post = relationship("Post", back_populates="attachments")

    def __repr__(self):
        return f"<Attachment(id={self.id}, filename_original='{self.filename_original}')>"
