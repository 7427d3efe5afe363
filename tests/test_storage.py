import asyncio
import io
import threading

import pytest
from PIL import Image

from filehost.core import storage as storage_module
from filehost.core.storage import (
    FileStorage,
    encode_webp,
    generate_unique_filename,
    webp_sibling_name,
)
from tests.conftest import make_png, make_settings


@pytest.fixture
def storage(tmp_path):
    return FileStorage(make_settings(tmp_path))


def test_unique_filename_keeps_stem_and_extension():
    name = generate_unique_filename("logo.png")
    assert name != "logo.png"
    assert name.startswith("logo_")
    assert name.endswith(".png")
    assert generate_unique_filename("logo.png") != name


def test_unique_filename_drops_directories():
    name = generate_unique_filename("../../etc/passwd")
    assert "/" not in name
    assert name.startswith("passwd_")


def test_webp_sibling_name():
    assert webp_sibling_name("photo_abc.jpeg") == "photo_abc.webp"
    assert webp_sibling_name("README") == "README.webp"


def test_encode_webp_produces_webp():
    data = encode_webp(make_png())
    with Image.open(io.BytesIO(data)) as im:
        assert im.format == "WEBP"
        assert im.size == (64, 64)


def test_encode_webp_handles_palette_images():
    buf = io.BytesIO()
    Image.new("P", (16, 16)).save(buf, format="GIF")
    with Image.open(io.BytesIO(encode_webp(buf.getvalue()))) as im:
        assert im.format == "WEBP"


def test_rename_never_overwrites(storage, tmp_path):
    folder = str(tmp_path / "uploads" / "acme")
    first = asyncio.run(storage.write_file(folder, "a.txt", b"a"))
    second = asyncio.run(storage.write_file(folder, "b.txt", b"b"))

    with pytest.raises(FileExistsError):
        asyncio.run(storage.rename_file(first, second))

    assert asyncio.run(storage.read_file(second)) == b"b"


def test_delete_missing_file_is_reported_not_raised(storage, tmp_path):
    assert asyncio.run(storage.delete_file(str(tmp_path / "nope.txt"))) is False


def test_ensure_folder_is_idempotent(storage, tmp_path):
    folder = str(tmp_path / "uploads" / "acme")
    asyncio.run(storage.ensure_folder(folder))
    asyncio.run(storage.ensure_folder(folder))
    assert (tmp_path / "uploads" / "acme").is_dir()


def test_remove_folder(storage, tmp_path):
    folder = str(tmp_path / "uploads" / "acme")
    asyncio.run(storage.write_file(folder, "a.txt", b"a"))
    assert asyncio.run(storage.remove_folder(folder))
    assert not (tmp_path / "uploads" / "acme").exists()
    assert asyncio.run(storage.remove_folder(folder))


def test_bulk_work_runs_off_the_event_loop(storage, tmp_path, monkeypatch):
    threads = []

    def recording(func):
        def wrapper(*args):
            threads.append(threading.current_thread())
            return func(*args)
        return wrapper

    monkeypatch.setattr(storage_module, "_write_bytes", recording(storage_module._write_bytes))
    monkeypatch.setattr(storage_module, "encode_webp", recording(storage_module.encode_webp))

    folder = str(tmp_path / "uploads" / "acme")
    source = asyncio.run(storage.write_file(folder, "logo.png", make_png()))
    size = asyncio.run(storage.convert_to_webp(source, str(tmp_path / "uploads" / "acme" / "logo.webp")))

    assert size > 0
    assert len(threads) == 3
    assert all(thread is not threading.main_thread() for thread in threads)
