"""
Module 07 - Submit Workflow Tests
Tests for workflows/submit.py

Tests:
- bundle contents for .picopak and .metadata.json inputs
- index preview and patch, dry run
- immutability check before anything is written
- artifact size/hash verification and sidecar validation
"""

import json

import pytest

from picopak.schemas.errors import (
    ConflictError,
    IntegrityError,
    MetadataValidationError,
    NotFoundError,
)
from workflows.artifacts import pack_directory
from workflows.submit import (
    INDEX_ENTRY_FILE,
    INSTRUCTIONS_FILE,
    PATCH_FILE,
    RELEASE_DATA_FILE,
    UPDATED_INDEX_FILE,
    prepare_submission,
    resolve_artifact_url,
)

from fixtures.common import make_array_index


@pytest.fixture
def packed(package_dir, tmp_path):
    return pack_directory(package_dir, tmp_path / "dist")


@pytest.fixture
def index_file(tmp_path):
    path = tmp_path / "index.json"
    path.write_text(json.dumps(make_array_index(versions=["3.10.1"]), indent=2) + "\n", encoding="utf-8")
    return path


class TestResolveArtifactUrl:
    """Tests for resolve_artifact_url()."""

    def test_default_template(self):
        assert resolve_artifact_url(None, "a.picopak") == "https://example.com/picopak/a.picopak"

    def test_placeholder(self):
        assert resolve_artifact_url("https://host/{file}?dl=1", "a.picopak") == "https://host/a.picopak?dl=1"

    def test_trailing_slash(self):
        assert resolve_artifact_url("https://host/releases/", "a.picopak") == "https://host/releases/a.picopak"

    def test_literal(self):
        assert resolve_artifact_url("https://host/exact.picopak", "a.picopak") == "https://host/exact.picopak"


class TestPrepareSubmission:
    """Bundle generation."""

    def test_bundle_from_archive(self, packed, tmp_path):
        result = prepare_submission(packed.archive_path, output_dir=tmp_path / "out")

        bundle = tmp_path / "out" / "FastLED-3.10.2-submit"
        assert result.bundle_dir == bundle
        assert (bundle / INSTRUCTIONS_FILE).is_file()
        assert not (bundle / UPDATED_INDEX_FILE).exists()

        entry = json.loads((bundle / INDEX_ENTRY_FILE).read_text(encoding="utf-8"))
        release = entry["FastLED"]
        assert release["version"] == "3.10.2"
        assert release["prerelease"] is False
        assert release["artifacts"]["rp2040"] == {
            "url": "https://example.com/picopak/FastLED-3.10.2.picopak",
            "sha256": packed.metadata.artifact.sha256,
        }

        data = json.loads((bundle / RELEASE_DATA_FILE).read_text(encoding="utf-8"))
        assert data["artifact_sha256"] == packed.metadata.artifact.sha256

    def test_bundle_from_sidecar_defaults_next_to_it(self, packed):
        result = prepare_submission(packed.metadata_path)
        assert result.bundle_dir.parent == packed.metadata_path.parent

    def test_index_preview_and_patch(self, packed, index_file, tmp_path):
        original = index_file.read_text(encoding="utf-8")

        result = prepare_submission(
            packed.archive_path,
            output_dir=tmp_path / "out",
            index_file=index_file,
            artifact_url="https://cdn.example.com/{file}",
        )

        assert index_file.read_text(encoding="utf-8") == original
        updated = json.loads(result.updated_index_path.read_text(encoding="utf-8"))
        versions = [r["version"] for r in updated["packages"][0]["releases"]]
        assert versions == ["3.10.1", "3.10.2"]

        patch = result.patch_path.read_text(encoding="utf-8")
        assert patch.startswith("--- a/index.json\n+++ b/index.updated.json\n")
        assert any(line.startswith("+") and '"version": "3.10.2"' in line for line in patch.splitlines())
        assert "https://cdn.example.com/FastLED-3.10.2.picopak" in patch

    def test_dry_run_skips_preview(self, packed, index_file, tmp_path):
        result = prepare_submission(packed.archive_path, output_dir=tmp_path / "out", index_file=index_file, dry_run=True)

        assert result.updated_index_path is None
        assert result.patch_path is None
        assert not (result.bundle_dir / PATCH_FILE).exists()
        assert (result.bundle_dir / INDEX_ENTRY_FILE).exists()

    def test_existing_version_conflicts_before_writing(self, packed, tmp_path):
        index_file = tmp_path / "index.json"
        index_file.write_text(json.dumps(make_array_index()), encoding="utf-8")

        with pytest.raises(ConflictError):
            prepare_submission(packed.archive_path, output_dir=tmp_path / "out", index_file=index_file)

        assert not (tmp_path / "out").exists()


class TestSubmitFailures:
    """Inputs that are rejected."""

    def test_missing_input(self, tmp_path):
        with pytest.raises(NotFoundError):
            prepare_submission(tmp_path / "nope.picopak")

    def test_wrong_kind_of_input(self, tmp_path):
        other = tmp_path / "notes.txt"
        other.write_text("hi", encoding="utf-8")
        with pytest.raises(MetadataValidationError):
            prepare_submission(other)

    def test_archive_without_sidecar(self, packed):
        packed.metadata_path.unlink()
        with pytest.raises(NotFoundError):
            prepare_submission(packed.archive_path)

    def test_tampered_archive(self, packed):
        with open(packed.archive_path, "ab") as f:
            f.write(b"tamper")

        with pytest.raises(IntegrityError) as exc_info:
            prepare_submission(packed.archive_path)
        assert "size mismatch" in exc_info.value.message

    def test_same_size_different_bytes(self, packed):
        data = bytearray(packed.archive_path.read_bytes())
        data[-1] ^= 0xFF
        packed.archive_path.write_bytes(bytes(data))

        with pytest.raises(IntegrityError) as exc_info:
            prepare_submission(packed.archive_path)
        assert "checksum mismatch" in exc_info.value.message

    def test_unsupported_schema_version(self, packed):
        sidecar = json.loads(packed.metadata_path.read_text(encoding="utf-8"))
        sidecar["schema_version"] = "9.9"
        packed.metadata_path.write_text(json.dumps(sidecar), encoding="utf-8")

        with pytest.raises(MetadataValidationError):
            prepare_submission(packed.metadata_path)

    def test_bad_sha256_in_sidecar(self, packed):
        sidecar = json.loads(packed.metadata_path.read_text(encoding="utf-8"))
        sidecar["artifact"]["sha256"] = "xyz"
        packed.metadata_path.write_text(json.dumps(sidecar), encoding="utf-8")

        with pytest.raises(MetadataValidationError) as exc_info:
            prepare_submission(packed.metadata_path)
        assert any(e.startswith("artifact.sha256") for e in exc_info.value.errors)

    def test_artifact_located_by_sibling_name(self, packed, tmp_path):
        sidecar = json.loads(packed.metadata_path.read_text(encoding="utf-8"))
        sidecar["artifact"]["file_path"] = str(tmp_path / "moved" / "gone.picopak")
        packed.metadata_path.write_text(json.dumps(sidecar), encoding="utf-8")

        result = prepare_submission(packed.metadata_path)
        assert result.artifact_path == packed.archive_path
