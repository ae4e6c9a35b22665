from unittest.mock import MagicMock, patch

import pytest
import requests

from app.core.errors import StoreError
from app.services.blob_store import LocalBlobStore, SupabaseBlobStore


def test_local_store_writes_and_overwrites(tmp_path):
    store = LocalBlobStore(str(tmp_path), "http://testserver/media/")

    url = store.put("draft-1/final.jpg", b"first", "image/jpeg")
    store.put("draft-1/final.jpg", b"second", "image/jpeg")

    assert url == "http://testserver/media/draft-1/final.jpg"
    assert (tmp_path / "draft-1" / "final.jpg").read_bytes() == b"second"
    assert len(list((tmp_path / "draft-1").iterdir())) == 1


@patch("app.services.blob_store.requests.post")
def test_supabase_store_upserts_and_returns_public_url(mock_post):
    mock_post.return_value = MagicMock(status_code=200)
    store = SupabaseBlobStore("https://proj.supabase.co/", "service-key", "quiz-images", timeout=5)

    url = store.put("abc/q-0.png", b"img", "image/png")

    assert url == "https://proj.supabase.co/storage/v1/object/public/quiz-images/abc/q-0.png"
    args, kwargs = mock_post.call_args
    assert args[0] == "https://proj.supabase.co/storage/v1/object/quiz-images/abc/q-0.png"
    assert kwargs["headers"]["x-upsert"] == "true"
    assert kwargs["headers"]["Content-Type"] == "image/png"
    assert kwargs["headers"]["Authorization"] == "Bearer service-key"
    assert kwargs["timeout"] == 5


@patch("app.services.blob_store.requests.post")
def test_supabase_store_failure_raises_store_error(mock_post):
    response = MagicMock()
    response.raise_for_status.side_effect = requests.HTTPError("413 Payload Too Large")
    mock_post.return_value = response
    store = SupabaseBlobStore("https://proj.supabase.co", "service-key", "quiz-images")

    with pytest.raises(StoreError):
        store.put("abc/q-0.png", b"img", "image/png")


@patch("app.services.blob_store.requests.post", side_effect=requests.ConnectionError("down"))
def test_supabase_store_network_error_raises_store_error(mock_post):
    store = SupabaseBlobStore("https://proj.supabase.co", "service-key", "quiz-images")

    with pytest.raises(StoreError):
        store.put("abc/q-0.png", b"img", "image/png")
