"""
Module 07 - Submit Workflow
File: submit.py

Purpose: Prepare non-destructive index update material from a packed
archive's metadata sidecar.

Bundle layout (<name>-<version>-submit/):
- index-entry.json             {name: release payload}
- release-data.json            full resolution record
- index.updated.json           preview of the mutated index (optional)
- index-update.patch           unified diff against the index (optional)
- submission-instructions.txt  next steps

Nothing here writes to the source index file or any remote index.
"""

from __future__ import annotations

import difflib
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from picopak.crypto.hashing import sha256_file
from picopak.index.mutator import apply_release
from picopak.schemas.errors import IntegrityError, MetadataValidationError, NotFoundError
from picopak.schemas.metadata import PackMetadata, ReleasePayload
from picopak.schemas.versioning import (
    UnsupportedMetadataSchemaError,
    assert_supported_metadata_schema,
)

from workflows.artifacts.archive import ARCHIVE_SUFFIX
from workflows.artifacts.io import dump_json, read_json_file, write_json_file
from workflows.artifacts.pack import METADATA_SUFFIX, metadata_path_for

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_URL_TEMPLATE = "https://example.com/picopak/{file}"

INDEX_ENTRY_FILE = "index-entry.json"
RELEASE_DATA_FILE = "release-data.json"
UPDATED_INDEX_FILE = "index.updated.json"
PATCH_FILE = "index-update.patch"
INSTRUCTIONS_FILE = "submission-instructions.txt"


@dataclass
class SubmissionResult:
    """Paths and payload produced by prepare_submission."""
    bundle_dir: Path
    metadata: PackMetadata
    artifact_path: Path
    release: ReleasePayload
    artifact_url: str
    updated_index_path: Optional[Path] = None
    patch_path: Optional[Path] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "bundle_dir": str(self.bundle_dir),
            "package": self.metadata.package.name,
            "version": self.metadata.package.version,
            "artifact_path": str(self.artifact_path),
            "artifact_url": self.artifact_url,
            "release": self.release.to_document(),
            "updated_index_path": str(self.updated_index_path) if self.updated_index_path else None,
            "patch_path": str(self.patch_path) if self.patch_path else None,
        }


def resolve_artifact_url(option_value: Optional[str], file_name: str) -> str:
    """
    Turn an --artifact-url value into a concrete URL.

    A `{file}` placeholder is substituted; a value ending in '/' gets the
    file name appended; an empty value uses the default template.
    """
    template = (option_value or "").strip()
    if not template:
        return DEFAULT_ARTIFACT_URL_TEMPLATE.replace("{file}", file_name)
    if "{file}" in template:
        return template.replace("{file}", file_name)
    return template + file_name if template.endswith("/") else template


def resolve_submit_inputs(input_path: str | Path) -> tuple[Path, Optional[Path]]:
    """
    Split the submit input into (sidecar path, explicit archive path).

    Raises:
        NotFoundError: Input or inferred sidecar missing
        MetadataValidationError: Input is neither a .picopak nor a sidecar
    """
    path = Path(input_path).resolve()
    if not path.exists():
        raise NotFoundError(f"Input path not found: {input_path}")
    if path.name.endswith(METADATA_SUFFIX):
        return path, None
    if path.suffix == ARCHIVE_SUFFIX:
        sidecar = metadata_path_for(path)
        if not sidecar.is_file():
            raise NotFoundError(
                f"Metadata file not found: {sidecar}\n"
                'Run "picopak pack <sourceDir>" first to emit metadata.'
            )
        return sidecar, path
    raise MetadataValidationError([
        "Input must be a .picopak artifact or a .metadata.json file emitted by pack."
    ])


def load_pack_metadata(metadata_path: str | Path) -> PackMetadata:
    """
    Read and validate a sidecar.

    Raises:
        FormatError: Not valid JSON
        MetadataValidationError: Unsupported schema_version or bad fields
    """
    data = read_json_file(metadata_path, what="metadata")
    if not isinstance(data, dict):
        raise MetadataValidationError(["metadata must be a JSON object"])
    try:
        assert_supported_metadata_schema(data.get("schema_version"))
    except UnsupportedMetadataSchemaError as e:
        raise MetadataValidationError([str(e)]) from e
    try:
        return PackMetadata.model_validate(data)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        ]
        raise MetadataValidationError(errors) from e


def locate_artifact(
    explicit: Optional[Path],
    metadata: PackMetadata,
    metadata_path: Path,
) -> Path:
    """Explicit archive, else the sidecar's file_path, else a sibling file_name."""
    if explicit is not None and explicit.is_file():
        return explicit

    candidates = []
    if metadata.artifact.file_path:
        candidates.append(Path(metadata.artifact.file_path))
    candidates.append(metadata_path.parent / metadata.artifact.file_name)
    for candidate in candidates:
        if candidate.is_file():
            return candidate.resolve()
    raise NotFoundError("Unable to locate local .picopak artifact referenced by metadata.")


def verify_artifact(artifact_path: Path, metadata: PackMetadata) -> None:
    """
    Check the archive's suffix, size and sha256 against the sidecar.

    Raises:
        MetadataValidationError: Not a .picopak file
        IntegrityError: Size or hash mismatch
    """
    if artifact_path.suffix != ARCHIVE_SUFFIX:
        raise MetadataValidationError([f"Artifact must be a {ARCHIVE_SUFFIX} file: {artifact_path}"])

    size = artifact_path.stat().st_size
    if size != metadata.artifact.size_bytes:
        raise IntegrityError(
            f"Artifact size mismatch. Expected {metadata.artifact.size_bytes}, got {size}.",
            details={"expected": metadata.artifact.size_bytes, "actual": size},
        )

    digest = sha256_file(artifact_path)
    expected = metadata.artifact.sha256.lower()
    if digest != expected:
        raise IntegrityError(
            f"Artifact checksum mismatch. Expected {expected}, got {digest}.",
            details={"expected": expected, "actual": digest},
        )


def build_index_patch(original_path: Path, original_text: str, updated_path: Path, updated_text: str) -> str:
    """Unified diff between the source index and its updated preview."""
    return "".join(difflib.unified_diff(
        original_text.splitlines(keepends=True),
        updated_text.splitlines(keepends=True),
        fromfile=f"a/{original_path.name}",
        tofile=f"b/{updated_path.name}",
    ))


def _instructions(
    bundle_dir: Path,
    metadata: PackMetadata,
    artifact_path: Path,
    artifact_url: str,
    updated_index_path: Optional[Path],
    patch_path: Optional[Path],
) -> str:
    pkg = metadata.package
    lines = [
        "PicoPak submit helper (non-destructive)",
        "",
        f"Package: {pkg.name}@{pkg.version}",
        f"Artifact: {artifact_path}",
        f"Artifact SHA256: {metadata.artifact.sha256}",
        f"Platforms: {', '.join(pkg.platforms)}",
        "",
        "Generated files:",
        f"- {INDEX_ENTRY_FILE} (release payload for index repo)",
        f"- {RELEASE_DATA_FILE} (full helper output)",
    ]
    if updated_index_path:
        lines.append(f"- {UPDATED_INDEX_FILE} (local preview update)")
    if patch_path:
        lines.append(f"- {PATCH_FILE} (unified diff to apply in index repo)")
    lines += [
        "",
        "Next steps:",
        "1) Upload artifact to your package hosting location.",
        "2) Clone/update your index repository locally.",
        "3) Apply generated release payload without editing existing versions.",
        "4) Open a PR with artifact URL + index change.",
        "",
        "Suggested commands:",
        "git clone <index-repo-url> picopak-index",
        "cd picopak-index",
    ]
    if patch_path:
        lines.append(f'git apply "{patch_path}"')
    else:
        lines.append(
            f'# Merge "{bundle_dir / INDEX_ENTRY_FILE}" into index.json '
            f"under {pkg.name}.releases.{pkg.version}"
        )
    lines += [
        "git add .",
        f'git commit -m "Add {pkg.name} {pkg.version}"',
        "git push origin <branch-name>",
        "",
        "Notes:",
        f"- Immutable version principle enforced: existing {pkg.name}@{pkg.version} must not be overwritten.",
        f"- Artifact URL: {artifact_url}",
    ]
    return "\n".join(lines) + "\n"


def prepare_submission(
    input_path: str | Path,
    *,
    output_dir: Optional[str | Path] = None,
    index_file: Optional[str | Path] = None,
    artifact_url: Optional[str] = None,
    dry_run: bool = False,
) -> SubmissionResult:
    """
    Generate a submission bundle for a packed archive.

    Args:
        input_path: A .picopak archive or its .metadata.json sidecar
        output_dir: Parent of the bundle directory (default: sidecar's dir)
        index_file: Local index.json to check immutability against and diff
        artifact_url: URL or template ({file}) where the archive is hosted
        dry_run: Check the index but skip writing the preview and patch

    Raises:
        NotFoundError, FormatError, MetadataValidationError,
        IntegrityError, ConflictError
    """
    metadata_path, explicit_artifact = resolve_submit_inputs(input_path)
    metadata = load_pack_metadata(metadata_path)
    artifact_path = locate_artifact(explicit_artifact, metadata, metadata_path)
    verify_artifact(artifact_path, metadata)

    url = resolve_artifact_url(artifact_url, metadata.artifact.file_name)
    release = ReleasePayload.from_metadata(metadata, url)
    pkg = metadata.package

    # the index is checked before anything is written
    updated_index = None
    index_path = None
    if index_file and str(index_file).strip():
        index_path = Path(str(index_file).strip()).resolve()
        current_index = read_json_file(index_path, what="index")
        updated_index = apply_release(current_index, pkg.name, pkg.version, release.to_document())

    base = Path(output_dir).resolve() if output_dir else metadata_path.parent
    bundle_dir = base / f"{pkg.name}-{pkg.version}-submit"
    bundle_dir.mkdir(parents=True, exist_ok=True)

    write_json_file(bundle_dir / INDEX_ENTRY_FILE, {pkg.name: release.to_document()})
    write_json_file(bundle_dir / RELEASE_DATA_FILE, {
        "metadata_file": str(metadata_path),
        "artifact_file": str(artifact_path),
        "artifact_sha256": metadata.artifact.sha256,
        "package": pkg.model_dump(mode="json", exclude_none=True),
        "release": release.to_document(),
    })

    updated_index_path = None
    patch_path = None
    if updated_index is not None and index_path is not None and not dry_run:
        updated_text = dump_json(updated_index)
        updated_index_path = bundle_dir / UPDATED_INDEX_FILE
        updated_index_path.write_text(updated_text, encoding="utf-8")
        patch = build_index_patch(
            index_path,
            index_path.read_text(encoding="utf-8"),
            updated_index_path,
            updated_text,
        )
        if patch:
            patch_path = bundle_dir / PATCH_FILE
            patch_path.write_text(patch, encoding="utf-8")

    (bundle_dir / INSTRUCTIONS_FILE).write_text(
        _instructions(bundle_dir, metadata, artifact_path, url, updated_index_path, patch_path),
        encoding="utf-8",
    )
    logger.info("Submit bundle written to %s", bundle_dir)

    return SubmissionResult(
        bundle_dir=bundle_dir,
        metadata=metadata,
        artifact_path=artifact_path,
        release=release,
        artifact_url=url,
        updated_index_path=updated_index_path,
        patch_path=patch_path,
    )
