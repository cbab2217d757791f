import pytest

from storeit.utils import (
    convert_file_size, format_date_time, get_file_type, get_file_icon, get_file_types_params,
    calculate_percentage, construct_file_url, construct_download_url, get_usage_summary,
)
from storeit.files.service import empty_total_space


@pytest.mark.parametrize("size, expected", [
    (0, "0 Bytes"),
    (1023, "1023 Bytes"),
    (1024, "1.0 KB"),
    (2048, "2.0 KB"),
    (5 * 1024 * 1024, "5.0 MB"),
    (3 * 1024 * 1024 * 1024, "3.0 GB"),
])
def test_convert_file_size(size, expected):
    assert convert_file_size(size) == expected

def test_convert_file_size_digits():
    assert convert_file_size(2048, 2) == "2.00 KB"
    assert convert_file_size(1536 * 1024, 2) == "1.50 MB"
    # zero digits behaves like the default
    assert convert_file_size(2048, 0) == "2.0 KB"

@pytest.mark.parametrize("name, expected", [
    ("report.pdf", ("document", "pdf")),
    ("Photo.JPG", ("image", "jpg")),
    ("clip.webm", ("video", "webm")),
    ("song.flac", ("audio", "flac")),
    ("archive.tar.gz", ("other", "gz")),
    ("README", ("other", "")),
    ("trailing.", ("other", "")),
])
def test_get_file_type(name, expected):
    assert get_file_type(name) == expected

def test_every_extension_maps_to_one_type():
    for name in ["a.docx", "a.psd", "a.svg", "a.mkv", "a.wav", "a.zip"]:
        file_type, _ = get_file_type(name)
        assert file_type in {"document", "image", "video", "audio", "other"}

def test_get_file_icon():
    assert get_file_icon("pdf", "document") == "/assets/icons/file-pdf.svg"
    assert get_file_icon("m4a", "other") == "/assets/icons/file-audio.svg"
    assert get_file_icon("png", "image") == "/assets/icons/file-image.svg"
    assert get_file_icon("zip", "other") == "/assets/icons/file-other.svg"

def test_format_date_time():
    assert format_date_time("2024-01-31T09:05:00.000+00:00") == "9:05am, 31 Jan"
    assert format_date_time("2024-03-05T00:07:00.000+00:00") == "12:07am, 5 Mar"
    assert format_date_time("2024-12-25T13:30:00.000Z") == "1:30pm, 25 Dec"
    assert format_date_time("") == "—"
    assert format_date_time(None) == "—"

def test_get_file_types_params():
    assert get_file_types_params("documents") == ["document"]
    assert get_file_types_params("images") == ["image"]
    assert get_file_types_params("media") == ["video", "audio"]
    assert get_file_types_params("others") == ["other"]
    assert get_file_types_params("whatever") == ["document"]

def test_calculate_percentage():
    assert calculate_percentage(1024 * 1024 * 1024) == 50.0
    assert calculate_percentage(0) == 0.0

def test_constructed_urls():
    assert construct_file_url("abc") == "https://testserver/storage/buckets/storeit/files/abc/view?project=storeit"
    assert construct_download_url("abc").endswith("/files/abc/download?project=storeit")

def test_usage_summary_merges_media():
    space = empty_total_space()
    space["video"] = {"size": 10, "latestDate": "2024-01-01T00:00:00.000+00:00"}
    space["audio"] = {"size": 5, "latestDate": "2024-02-01T00:00:00.000+00:00"}
    tiles = {t["title"]: t for t in get_usage_summary(space)}
    assert list(tiles) == ["Documents", "Images", "Media", "Others"]
    assert tiles["Media"]["size"] == 15
    assert tiles["Media"]["latestDate"] == "2024-02-01T00:00:00.000+00:00"
    assert tiles["Media"]["url"] == "/media"
