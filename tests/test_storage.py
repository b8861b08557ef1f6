import pytest
from botocore.exceptions import ClientError

from app.core.config import Settings
from app.core.storage import LocalStorage, S3Storage, create_storage
from app.db.init_data import seed_sample_posts, SAMPLE_POSTS


class RecordingS3Client:
    def __init__(self, fail=False):
        self.objects = {}
        self.fail = fail

    def put_object(self, Bucket, Key, Body, **kwargs):
        if self.fail:
            raise ClientError({"Error": {"Code": "500", "Message": "boom"}}, "PutObject")
        self.objects[(Bucket, Key)] = (Body, kwargs)

    def delete_object(self, Bucket, Key):
        self.objects.pop((Bucket, Key), None)


class TestS3Storage:
    async def test_save_uses_bucket_prefix(self):
        client = RecordingS3Client()
        storage = S3Storage("sharinglove", region="ap-northeast-2", client=client)

        url = await storage.save("documents", "1-abc-결산서.pdf", b"data", "application/pdf")

        assert url == "https://sharinglove.s3.ap-northeast-2.amazonaws.com/documents/1-abc-결산서.pdf"
        body, extra = client.objects[("sharinglove", "documents/1-abc-결산서.pdf")]
        assert body == b"data"
        assert extra["ContentType"] == "application/pdf"

        await storage.delete("documents", "1-abc-결산서.pdf")
        assert client.objects == {}

    async def test_custom_endpoint_url(self):
        storage = S3Storage("uploads", endpoint_url="https://storage.example.com/", client=RecordingS3Client())
        assert await storage.save("images", "a.png", b"x") == "https://storage.example.com/uploads/images/a.png"

    async def test_client_errors_become_os_errors(self):
        storage = S3Storage("uploads", client=RecordingS3Client(fail=True))
        with pytest.raises(OSError):
            await storage.save("images", "a.png", b"x")

    def test_bucket_name_required(self):
        with pytest.raises(ValueError):
            S3Storage("", client=RecordingS3Client())


class TestLocalStorage:
    async def test_save_and_delete(self, tmp_path):
        storage = LocalStorage(str(tmp_path), public_base_url="https://api.example.com/")

        url = await storage.save("images", "a.png", b"png")

        assert url == "https://api.example.com/uploads/images/a.png"
        assert (tmp_path / "images" / "a.png").read_bytes() == b"png"

        await storage.delete("images", "a.png")
        assert not (tmp_path / "images" / "a.png").exists()

    async def test_existing_key_not_overwritten(self, tmp_path):
        storage = LocalStorage(str(tmp_path))
        await storage.save("documents", "a.pdf", b"first")

        with pytest.raises(FileExistsError):
            await storage.save("documents", "a.pdf", b"second")

    def test_factory(self, tmp_path):
        assert isinstance(create_storage(Settings(STORAGE_TYPE="local", UPLOAD_DIR=str(tmp_path))), LocalStorage)
        with pytest.raises(ValueError):
            create_storage(Settings(STORAGE_TYPE="ftp"))


class TestSeedData:
    async def test_sample_posts_seeded_once(self, session):
        assert await seed_sample_posts(session) == len(SAMPLE_POSTS)
        assert await seed_sample_posts(session) == 0
