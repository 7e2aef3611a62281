"""
Tests for image uploads
"""
import pytest
import uuid
from fastapi.testclient import TestClient

from main import app
from utils.errors import UploadError
from utils.session import SESSION_COOKIE
from utils.storage import ImageStore, file_extension

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


class TestUploadImage:
    """Test the image upload endpoint"""

    def test_upload_image(self, client, board_context):
        """Test an upload returns a public URL named after the session"""
        session_id = client.get("/session").json()["session_id"]

        response = client.post("/images", files={"image": ("photo.PNG", PNG_BYTES, "image/png")})

        assert response.status_code == 200
        url = response.json()["url"]
        assert url.startswith(f"/uploads/public/{session_id}-")
        assert url.endswith(".png")

        stored = board_context.images.root / url[len("/uploads/"):]
        assert stored.read_bytes() == PNG_BYTES

    def test_note_with_uploaded_image(self, client):
        """Test the upload-then-post flow"""
        url = client.post("/images", files={"image": ("cat.gif", b"GIF89a", "image/gif")}).json()["url"]

        response = client.post("/notes", json={"message": "Look at this", "image_url": url})
        assert response.status_code == 200
        assert response.json()["image_url"] == url

    def test_rejects_other_file_types(self, client):
        """Test only png, jpeg and gif are accepted"""
        response = client.post("/images", files={"image": ("notes.txt", b"hello", "text/plain")})
        assert response.status_code == 400

    def test_rejects_large_files(self, client, board_context):
        """Test uploads over the size limit are refused"""
        board_context.images.max_bytes = 16

        response = client.post("/images", files={"image": ("big.jpg", b"x" * 17, "image/jpeg")})
        assert response.status_code == 413

    def test_storage_failure(self, client, board_context, tmp_path):
        """Test a failing write surfaces as an upload error"""
        blocker = tmp_path / "not-a-directory"
        blocker.write_text("")
        board_context.images.root = blocker

        response = client.post("/images", files={"image": ("photo.png", PNG_BYTES, "image/png")})
        assert response.status_code == 502
        assert response.json()["detail"] == "Failed to upload image. Please try again."

    @pytest.mark.parametrize("cookie", ["../../escaped", "abc/def"])
    def test_non_uuid_session_cookie_is_replaced(self, client, board_context, tmp_path, cookie):
        """Test a crafted session cookie cannot steer where the image is written"""
        with TestClient(app, headers={"Cookie": f"{SESSION_COOKIE}={cookie}"}) as crafted:
            response = crafted.post("/images", files={"image": ("photo.png", PNG_BYTES, "image/png")})

        assert response.status_code == 200
        url = response.json()["url"]
        assert ".." not in url
        session_id = url[len("/uploads/public/"):].rsplit("-", 1)[0]
        assert uuid.UUID(session_id)
        assert SESSION_COOKIE in response.headers["set-cookie"]

        stored = board_context.images.root / url[len("/uploads/"):]
        assert stored.read_bytes() == PNG_BYTES
        assert list(tmp_path.rglob("escaped*")) == []
        assert list(tmp_path.rglob("def-*")) == []


class TestImageStore:

    def test_object_name_keeps_extension(self, tmp_path):
        store = ImageStore(str(tmp_path))
        name = store.object_name("session-1", "holiday.jpeg")
        assert name.startswith("public/session-1-")
        assert name.endswith(".jpeg")

    def test_public_url_uses_base_url(self, tmp_path):
        store = ImageStore(str(tmp_path), base_url="https://board.example.com/")
        assert store.public_url("public/a.png") == "https://board.example.com/uploads/public/a.png"

    @pytest.mark.parametrize("filename,expected", [
        ("a.PNG", "png"),
        ("archive.tar.gif", "gif"),
        ("noext", ""),
        ("", ""),
    ])
    def test_file_extension(self, filename, expected):
        assert file_extension(filename) == expected

    def test_upload_refuses_paths_outside_store(self, tmp_path):
        store = ImageStore(str(tmp_path / "uploads"))

        with pytest.raises(UploadError):
            store.upload("../../escaped", "photo.png", PNG_BYTES)

        assert list(tmp_path.rglob("escaped*")) == []
