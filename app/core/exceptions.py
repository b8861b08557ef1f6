"""
애플리케이션 예외 정의
각 예외는 HTTP 상태 코드와 사용자에게 보여줄 메시지를 가진다.
"""
from fastapi import status


class AppError(Exception):
    """도메인 예외 기본 클래스"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "서버 내부 오류가 발생했습니다."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "필수 필드가 누락되었습니다."


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "인증이 필요합니다."


class InvalidCredentialsError(UnauthorizedError):
    # 아이디와 비밀번호 중 무엇이 틀렸는지 구분하지 않는다
    default_message = "아이디 또는 비밀번호가 올바르지 않습니다."


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "요청한 자원을 찾을 수 없습니다."


class UploadedFileNotFoundError(NotFoundError):
    default_message = "파일을 찾을 수 없습니다."


class PostNotFoundError(NotFoundError):
    default_message = "게시글을 찾을 수 없습니다."


class PinLimitExceededError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "고정 공지는 최대 3개까지만 등록할 수 있습니다."


class MissingAttachmentError(ValidationError):
    default_message = "예산/결산은 첨부파일이 필수입니다."


class MissingThumbnailError(ValidationError):
    default_message = "갤러리는 이미지가 필수입니다."


class FileUploadError(AppError):
    """파일 업로드 관련 예외"""
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "파일 업로드에 실패했습니다."


class StorageError(AppError):
    """저장소 오류 (상세 내용은 로그에만 남긴다)"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "파일 저장 중 오류가 발생했습니다."
