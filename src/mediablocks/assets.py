"""Asset handling for mediablocks."""

import shutil
import time
from pathlib import Path

# Files referenced by media embeds and copied to the build
SUPPORTED_ASSET_EXTENSIONS = {
    # Images
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".svg",
    ".webp",
    ".avif",
    ".bmp",
    ".ico",
    # Media
    ".mp4",
    ".webm",
    ".mp3",
    # Documents
    ".pdf",
}


def robust_rmtree(path: Path, retries: int = 3, delay: float = 0.1) -> None:
    """Remove a directory tree with retry logic for macOS file descriptor races."""
    for attempt in range(retries):
        try:
            shutil.rmtree(path)
            return
        except OSError:
            if attempt < retries - 1:
                time.sleep(delay * (attempt + 1))
            else:
                raise


def _asset_files(directory: Path, extensions: set[str] | None) -> set[Path]:
    """Relative paths of the asset files under directory."""
    return {
        f.relative_to(directory)
        for f in directory.glob("**/*")
        if f.is_file() and (not extensions or f.suffix.lower() in extensions)
    }


def copy_assets_incremental(
    src_dir: Path,
    target_dir: Path,
    force_rebuild: bool = False,
    extensions: set[str] | None = SUPPORTED_ASSET_EXTENSIONS,
) -> int:
    """Copy new or modified asset files and drop deleted ones.

    Args:
        src_dir: Source directory to copy from
        target_dir: Target directory to copy to
        force_rebuild: If True, recreate target_dir from scratch
        extensions: File extensions to include (None for all files)

    Returns:
        Number of files copied
    """
    if force_rebuild and target_dir.exists():
        robust_rmtree(target_dir)

    source_files = _asset_files(src_dir, extensions)
    copied = 0

    for rel_path in sorted(source_files):
        src_file = src_dir / rel_path
        target_file = target_dir / rel_path
        if (
            target_file.exists()
            and src_file.stat().st_mtime <= target_file.stat().st_mtime
        ):
            continue
        target_file.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src_file, target_file)
        copied += 1

    if target_dir.exists():
        for rel_path in _asset_files(target_dir, extensions) - source_files:
            (target_dir / rel_path).unlink()

    return copied


def copy_user_assets(
    vault_path: Path, build_dir: Path, assets_dir: str, force_rebuild: bool
) -> int:
    """Copy the vault's assets directory into the build directory."""
    assets_src = vault_path / assets_dir
    if not assets_src.exists():
        return 0
    return copy_assets_incremental(assets_src, build_dir / assets_dir, force_rebuild)
