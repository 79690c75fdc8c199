"""
Module 06 - Install Workflow Tests
Tests for workflows/install.py

Tests:
- local archive install, list-only, replacement
- install by name through a mocked index and download
- failed verification keeps the previous install
- list_installed / remove_installed
"""

import json
import zipfile
from pathlib import Path

import pytest

from picopak.config.runtime import RuntimeConfig
from picopak.crypto.hashing import sha256_file
from picopak.http import HttpClient
from picopak.schemas.errors import (
    ChecksumMismatchError,
    ContentValidationError,
    NoArtifactError,
    NotFoundError,
)
from workflows.artifacts import pack_directory
from workflows.install import (
    install_package,
    is_package_name_reference,
    list_installed,
    remove_installed,
)

from fixtures.common import (
    FakeResponse,
    json_response,
    make_manifest_doc,
    make_mock_session,
)

INDEX_URL = "https://index.example.com/index.json"
ARTIFACT_URL = "https://cdn.example.com/FastLED-3.10.2.picopak"


@pytest.fixture
def archive(package_dir, tmp_path):
    return pack_directory(package_dir, tmp_path / "dist").archive_path


@pytest.fixture
def project(tmp_path):
    root = tmp_path / "firmware"
    root.mkdir()
    (root / "CMakeLists.txt").write_text("project(firmware)\n", encoding="utf-8")
    return root


def _config() -> RuntimeConfig:
    return RuntimeConfig(index_urls=[INDEX_URL])


def _index(checksum: str) -> dict:
    return {"packages": [{
        "name": "FastLED",
        "releases": [{
            "version": "3.10.2",
            "artifacts": {"rp2040": {"url": ARTIFACT_URL, "sha256": checksum}},
        }],
    }]}


class TestReferenceKind:
    """Tests for is_package_name_reference()."""

    @pytest.mark.parametrize("value", ["FastLED", "pico-ws2812"])
    def test_names(self, value):
        assert is_package_name_reference(value)

    @pytest.mark.parametrize("value", ["FastLED.picopak", "dist/FastLED", "C:FastLED", ""])
    def test_paths(self, value):
        assert not is_package_name_reference(value)

    def test_existing_path(self, tmp_path):
        (tmp_path / "FastLED").mkdir()
        assert not is_package_name_reference("FastLED")


class TestInstallLocal:
    """Installing a local .picopak file."""

    def test_install(self, archive, project):
        result = install_package(str(archive), _config(), project_dir=project)

        target = project / "libs" / "FastLED"
        assert result.install_dir == target
        assert (target / "cmake" / "FastLED.cmake").is_file()
        assert (target / "picopak.json").is_file()
        assert not result.replaced_existing
        assert not (project / "libs" / "FastLED.new").exists()

    def test_list_only_touches_nothing(self, archive, project):
        result = install_package(str(archive), _config(), project_dir=project, list_only=True)

        assert result.listed_only
        assert "picopak.json" in result.files
        assert result.metadata.version == "3.10.2"
        assert not (project / "libs").exists()

    def test_replaces_previous_install(self, archive, project):
        stale = project / "libs" / "FastLED"
        stale.mkdir(parents=True)
        (stale / "old.txt").write_text("old", encoding="utf-8")

        result = install_package(str(archive), _config(), project_dir=project)

        assert result.replaced_existing
        assert not (stale / "old.txt").exists()

    def test_missing_cmake_keeps_previous(self, tmp_path, project):
        previous = project / "libs" / "FastLED"
        previous.mkdir(parents=True)
        (previous / "marker.txt").write_text("keep", encoding="utf-8")

        bad = tmp_path / "bad.picopak"
        with zipfile.ZipFile(bad, "w") as zf:
            zf.writestr("picopak.json", json.dumps(make_manifest_doc()))

        with pytest.raises(ContentValidationError):
            install_package(str(bad), _config(), project_dir=project)

        assert (previous / "marker.txt").read_text(encoding="utf-8") == "keep"
        assert not (project / "libs" / "FastLED.new").exists()

    def test_failed_swap_restores_previous(self, archive, project, monkeypatch):
        previous = project / "libs" / "FastLED"
        previous.mkdir(parents=True)
        (previous / "marker.txt").write_text("keep", encoding="utf-8")

        real_rename = Path.rename

        def _rename(self, target):
            if self.name == "FastLED.new":
                raise OSError("device busy")
            return real_rename(self, target)

        monkeypatch.setattr(Path, "rename", _rename)

        with pytest.raises(OSError):
            install_package(str(archive), _config(), project_dir=project)

        assert (previous / "marker.txt").read_text(encoding="utf-8") == "keep"
        assert sorted(p.name for p in (project / "libs").iterdir()) == ["FastLED"]

    def test_replace_leaves_no_backup(self, archive, project):
        (project / "libs" / "FastLED").mkdir(parents=True)

        install_package(str(archive), _config(), project_dir=project)

        assert sorted(p.name for p in (project / "libs").iterdir()) == ["FastLED"]

    def test_archive_without_manifest(self, tmp_path, project):
        bad = tmp_path / "empty.picopak"
        with zipfile.ZipFile(bad, "w") as zf:
            zf.writestr("README.md", "nothing here")

        with pytest.raises(ContentValidationError):
            install_package(str(bad), _config(), project_dir=project)

    def test_wrong_suffix(self, tmp_path, project):
        other = tmp_path / "FastLED.zip"
        other.write_bytes(b"")
        with pytest.raises(ContentValidationError):
            install_package(str(other), _config(), project_dir=project)

    def test_missing_file(self, project):
        with pytest.raises(NotFoundError):
            install_package("dist/none.picopak", _config(), project_dir=project)

    def test_missing_project_dir(self, archive, tmp_path):
        with pytest.raises(NotFoundError):
            install_package(str(archive), _config(), project_dir=tmp_path / "nowhere")


class TestInstallByName:
    """Resolving and downloading through the index."""

    def test_install_from_index(self, archive, project):
        session = make_mock_session({
            INDEX_URL: json_response(_index(sha256_file(archive))),
            ARTIFACT_URL: FakeResponse(200, archive.read_bytes()),
        })

        result = install_package("fastled", _config(), project_dir=project, client=HttpClient(session=session))

        assert result.resolved.version == "3.10.2"
        assert result.resolved.platform == "rp2040"
        assert (project / "libs" / "FastLED" / "cmake" / "FastLED.cmake").is_file()

    def test_checksum_mismatch_installs_nothing(self, archive, project):
        session = make_mock_session({
            INDEX_URL: json_response(_index("0" * 64)),
            ARTIFACT_URL: FakeResponse(200, archive.read_bytes()),
        })

        with pytest.raises(ChecksumMismatchError):
            install_package("FastLED", _config(), project_dir=project, client=HttpClient(session=session))

        assert not (project / "libs").exists()

    def test_platform_without_artifact(self, archive, project):
        session = make_mock_session({INDEX_URL: json_response(_index(sha256_file(archive)))})

        with pytest.raises(NoArtifactError):
            install_package(
                "FastLED", _config(), project_dir=project, platform="rp2350",
                client=HttpClient(session=session),
            )


class TestListAndRemove:
    """Tests for list_installed() and remove_installed()."""

    def test_list_reads_manifests(self, archive, project):
        install_package(str(archive), _config(), project_dir=project)
        (project / "libs" / "handmade").mkdir()

        installed = list_installed(project)

        assert [(p.name, p.version) for p in installed] == [("FastLED", "3.10.2"), ("handmade", None)]

    def test_list_without_libs(self, project):
        assert list_installed(project) == []

    def test_unreadable_manifest_still_listed(self, project):
        broken = project / "libs" / "broken"
        broken.mkdir(parents=True)
        (broken / "picopak.json").write_text("{", encoding="utf-8")

        assert [p.name for p in list_installed(project)] == ["broken"]

    def test_remove(self, archive, project):
        install_package(str(archive), _config(), project_dir=project)

        removed = remove_installed("FastLED", project)

        assert removed == project / "libs" / "FastLED"
        assert not removed.exists()

    def test_remove_missing(self, project):
        with pytest.raises(NotFoundError):
            remove_installed("FastLED", project)

    def test_remove_rejects_traversal(self, project):
        with pytest.raises(NotFoundError):
            remove_installed("..", project)
