"""Tests for archive creation."""

from __future__ import annotations

import zipfile

import pytest

from fluxforge.archive import ArchiveOptions, create_archive, extract_archive
from fluxforge.archive.create import PASSWORD_NOT_APPLIED, archive_filename
from fluxforge.archive.formats import ArchiveFormat
from fluxforge.core import ExportIOError, FormatNotImplementedError, InvalidRequestError, UnsupportedFormatError


@pytest.fixture
def sources(tmp_path):
    folder = tmp_path / "src"
    folder.mkdir()
    first = folder / "first.pdf"
    first.write_bytes(b"%PDF first" * 50)
    second = folder / "second.png"
    second.write_bytes(bytes(range(256)) * 4)
    return first, second


def test_creates_flat_zip(flat_config, export_base, sources):
    result = create_archive(flat_config, list(sources), "bundle")

    output = (export_base / "FluxForge" / "Archives" / "bundle.zip").resolve()
    assert result.success
    assert result.output_files == [output]
    assert result.message == "Compressed 2 files into bundle.zip"
    assert result.to_dict()["output_files"] == [str(output)]
    with zipfile.ZipFile(output) as archive:
        assert sorted(archive.namelist()) == ["first.pdf", "second.png"]
        for path in sources:
            assert archive.read(path.name) == path.read_bytes()
        assert all(info.compress_type == zipfile.ZIP_DEFLATED for info in archive.infolist())


def test_skips_missing_and_directories(tmp_path, flat_config, sources):
    missing = tmp_path / "nope.txt"
    result = create_archive(flat_config, [missing, *sources, tmp_path], "mixed")

    assert result.success
    assert "Compressed 2 files" in result.message
    assert "skipped 2" in result.message
    with zipfile.ZipFile(result.output_files[0]) as archive:
        assert len(archive.namelist()) == 2


def test_duplicate_base_names_keep_first(tmp_path, flat_config):
    a = tmp_path / "a"
    b = tmp_path / "b"
    a.mkdir()
    b.mkdir()
    (a / "same.txt").write_text("first")
    (b / "same.txt").write_text("second")

    result = create_archive(flat_config, [a / "same.txt", b / "same.txt"], "dupes")

    with zipfile.ZipFile(result.output_files[0]) as archive:
        assert archive.namelist() == ["same.txt"]
        assert archive.read("same.txt") == b"first"


def test_empty_selection_writes_empty_zip(tmp_path, flat_config):
    result = create_archive(flat_config, [tmp_path / "missing"], "empty")

    with zipfile.ZipFile(result.output_files[0]) as archive:
        assert archive.namelist() == []


def test_existing_extension_is_kept_and_file_replaced(flat_config, sources):
    first = create_archive(flat_config, [sources[0]], "out.zip")
    second = create_archive(flat_config, [sources[1]], "out.zip")

    assert first.output_files == second.output_files
    assert first.output_files[0].name == "out.zip"
    with zipfile.ZipFile(second.output_files[0]) as archive:
        assert archive.namelist() == ["second.png"]


def test_password_is_reported_not_applied(flat_config, sources):
    result = create_archive(flat_config, list(sources), "locked", ArchiveOptions(password="secret"))

    assert PASSWORD_NOT_APPLIED in result.message
    with zipfile.ZipFile(result.output_files[0]) as archive:
        assert not any(info.flag_bits & 0x1 for info in archive.infolist())
        assert archive.read("first.pdf") == sources[0].read_bytes()


def test_rar_creation_is_unsupported(flat_config, sources, export_base):
    with pytest.raises(UnsupportedFormatError):
        create_archive(flat_config, list(sources), "out", ArchiveOptions(format="rar"))
    assert not (export_base / "FluxForge").exists()


def test_7z_creation_is_not_implemented(flat_config, sources):
    with pytest.raises(FormatNotImplementedError):
        create_archive(flat_config, list(sources), "out", ArchiveOptions(format="7z"))


def test_unknown_format(flat_config, sources):
    with pytest.raises(UnsupportedFormatError):
        create_archive(flat_config, list(sources), "out", ArchiveOptions(format="tar"))


@pytest.mark.parametrize("name", ["", "   "])
def test_empty_output_name(flat_config, sources, name):
    with pytest.raises(InvalidRequestError):
        create_archive(flat_config, list(sources), name)


def test_output_name_cannot_escape(flat_config, sources, export_base):
    with pytest.raises(InvalidRequestError):
        create_archive(flat_config, list(sources), "../../escape")
    assert not (export_base / "escape.zip").exists()


def test_failed_write_leaves_no_partial_file(flat_config, sources, export_base, monkeypatch):
    def broken_write(target, entries):
        target.write_bytes(b"partial")
        raise OSError("disk full")

    monkeypatch.setattr("fluxforge.archive.create._write_zip", broken_write)

    with pytest.raises(ExportIOError, match="disk full"):
        create_archive(flat_config, list(sources), "broken")

    archives = export_base / "FluxForge" / "Archives"
    assert list(archives.iterdir()) == []


def test_archive_filename():
    assert archive_filename("bundle", ArchiveFormat.ZIP) == "bundle.zip"
    assert archive_filename("bundle.ZIP", ArchiveFormat.ZIP) == "bundle.ZIP"


def test_extract_create_extract_round_trip(tmp_path, flat_config, export_base):
    """Contents survive extraction, re-packing and extraction again."""
    original = tmp_path / "orig.zip"
    payload = {"one.bin": bytes(range(256)) * 64, "two.txt": "grüße\n".encode() * 100}
    with zipfile.ZipFile(original, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for name, data in payload.items():
            archive.writestr(name, data)

    first_root = extract_archive(flat_config, original).output_files[0]
    repacked = create_archive(flat_config, sorted(first_root.iterdir()), "repacked").output_files[0]
    second_root = extract_archive(flat_config, repacked).output_files[0]

    assert second_root.name == "repacked"
    for name, data in payload.items():
        assert (second_root / name).read_bytes() == data
