import pytest

from wcraw.errors import StorageWriteFailure
from wcraw.storage import EMPTY_BODY_PLACEHOLDER, ArtifactStore, artifact_name


@pytest.mark.parametrize(
    "url,name",
    [
        ("http://www.example.com", "www.example.com-index.html"),
        ("http://www.example.com/", "www.example.com-index.html"),
        ("http://www.example.com/a/b/c.html", "www.example.com-c.html"),
        ("http://www.example.com/a/b/", "www.example.com-b.html"),
        ("http://www.example.com/docs/report.pdf?x=1", "www.example.com-report.pdf"),
        ("http://127.0.0.1:8080/page1", "127.0.0.1_8080-page1.html"),
        ("http://www.example.com/a%3Fb", "www.example.com-a_b.html"),
    ],
)
def test_artifact_name(url, name):
    assert artifact_name(url) == name


def test_save_writes_body(destination):
    store = ArtifactStore(destination)
    path = store.save("http://www.example.com/about", "<h1>About</h1>")
    assert path == destination / "www.example.com-about.html"
    assert path.read_text(encoding="utf-8") == "<h1>About</h1>"


@pytest.mark.parametrize("body", ["", None])
def test_empty_body_is_replaced_by_placeholder(destination, body):
    path = ArtifactStore(destination).save("http://www.example.com/empty", body)
    assert path.read_text(encoding="utf-8") == EMPTY_BODY_PLACEHOLDER


def test_same_key_overwrites(destination):
    store = ArtifactStore(destination)
    store.save("http://www.example.com/x/page", "first")
    path = store.save("http://www.example.com/y/page", "second")
    assert path.read_text(encoding="utf-8") == "second"
    assert len(list(destination.iterdir())) == 1


def test_write_error_is_wrapped(tmp_path):
    store = ArtifactStore(tmp_path / "missing")
    with pytest.raises(StorageWriteFailure) as info:
        store.save("http://www.example.com/a", "body")
    assert info.value.path == tmp_path / "missing" / "www.example.com-a.html"
