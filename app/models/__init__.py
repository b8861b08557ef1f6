# SQLAlchemy 모델들을 여기서 import
from .base import Base
from .admin import Admin
from .board import Post, BoardType, BudgetType, MAX_PINNED_NOTICES, TITLE_MAX_LENGTH
from .board_attachment import Attachment
