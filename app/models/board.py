"""
게시판 모델
"""
from sqlalchemy import Column, Integer, String, Text, Boolean, Enum as SQLEnum, Index
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampMixin


class BoardType(str, enum.Enum):
    """게시판 종류"""
    NOTICE = "NOTICE"  # 공지사항
    BUDGET = "BUDGET"  # 예산/결산
    RESOURCE = "RESOURCE"  # 자료실
    GALLERY = "GALLERY"  # 갤러리


class BudgetType(str, enum.Enum):
    """예산/결산 구분"""
    BUDGET = "BUDGET"  # 예산
    SETTLEMENT = "SETTLEMENT"  # 결산


TITLE_MAX_LENGTH = 100
MAX_PINNED_NOTICES = 3


class Post(Base, TimestampMixin):
    """게시글 모델"""
    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, index=True)
    board_type = Column(SQLEnum(BoardType, name="board_type"), nullable=False, comment="게시판 종류")

    # 게시글 정보
    title = Column(String(TITLE_MAX_LENGTH), nullable=False, comment="제목")
    content = Column(Text, nullable=True, comment="내용 (HTML)")
    is_published = Column(Boolean, default=True, nullable=False, comment="공개 여부")

    # 통계
    views = Column(Integer, default=0, nullable=False, comment="조회수")

    # 공지사항 전용
    is_pinned = Column(Boolean, nullable=True, comment="상단 고정 여부")

    # 예산/결산 전용
    year = Column(Integer, nullable=True, comment="회계연도")
    budget_type = Column(SQLEnum(BudgetType, name="budget_type"), nullable=True, comment="예산/결산 구분")

    # 갤러리 전용
    thumbnail_url = Column(String(1000), nullable=True, comment="대표 이미지 URL")

    attachments = relationship(
        "Attachment",
        back_populates="post",
        cascade="all, delete-orphan",
        order_by="Attachment.display_order",
        lazy="selectin",
    )

    __table_args__ = (
        Index("ix_posts_board_type_created_at", "board_type", "created_at"),
    )

    def __repr__(self):
        return f"<Post(id={self.id}, title='{self.title}', board_type='{self.board_type}')>"
