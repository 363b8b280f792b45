from __future__ import annotations

import io
import zipfile
from pathlib import Path, PurePosixPath

from botpath.materials import PLACEHOLDER_VTF
from botpath.pipeline import ModelBuild


def bundle_files(build: ModelBuild) -> dict[str, bytes]:
    """Relative POSIX path -> contents for every file a build produces."""

    files: dict[str, bytes] = {}
    for stem, smd, qc in build.documents:
        files[f"{stem}.smd"] = smd.encode("utf-8")
        files[f"{stem}.qc"] = qc.encode("utf-8")
    if not build.chunks:
        return files

    material_root = PurePosixPath("materials") / build.output.material_dir
    files[str(material_root / f"{build.output.texture_name}.vtf")] = PLACEHOLDER_VTF
    for material in build.materials:
        files[str(material_root / material.file_name)] = material.to_vmt().encode("utf-8")
    return files


def next_available_path(path: Path) -> Path:
    """Return a non-conflicting path by appending ' (n)' before the suffix."""

    if not path.exists():
        return path

    parent = path.parent
    stem = path.stem
    suffix = path.suffix
    n = 1
    while True:
        candidate = parent / f"{stem} ({n}){suffix}"
        if not candidate.exists():
            return candidate
        n += 1


def write_bundle(build: ModelBuild, directory: Path, overwrite: bool = False) -> list[Path]:
    """Write every bundle file under ``directory`` and return the paths written.

    Without ``overwrite``, a file that already exists is left alone and the
    new contents go to the next free ``name (n).ext``. Files whose existing
    contents already match are skipped.
    """

    directory = Path(directory)
    written: list[Path] = []
    for relative, payload in bundle_files(build).items():
        target = directory / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        if target.exists() and not overwrite:
            if target.read_bytes() == payload:
                continue
            target = next_available_path(target)
        target.write_bytes(payload)
        written.append(target)
    return written


def bundle_to_zip(build: ModelBuild) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for relative, payload in bundle_files(build).items():
            archive.writestr(relative, payload)
    return buffer.getvalue()


__all__ = ["bundle_files", "bundle_to_zip", "next_available_path", "write_bundle"]
