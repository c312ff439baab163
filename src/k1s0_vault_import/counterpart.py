"""カウンターパート YAML ファイルの特定と更新"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

import yaml

from .document import detect_indent, emit_document, is_mapping, parse_document
from .exceptions import VaultImportError, VaultImportErrorCodes
from .patcher import patch_document
from .reference import build_reference

SECRETS_MARKER = "-secrets"
COUNTERPART_SUFFIX = ".yaml"


def clean_filename(path: str | Path) -> str:
    """SOPS ファイル名から素の名前を取り出す。

    - "app-secrets.enc.yaml" -> "app"
    - "myapp.sops.yaml" -> "myapp"
    - "/path/to/config-secrets.yaml" -> "config"
    """
    name = Path(path).name
    marker = name.find(SECRETS_MARKER)
    if marker != -1:
        return name[:marker]
    dot = name.find(".")
    if dot != -1:
        return name[:dot]
    return name


def counterpart_filename(sops_path: str | Path) -> Path:
    """SOPS ファイルと同じディレクトリにあるカウンターパートのパスを返す。"""
    sops_path = Path(sops_path)
    return sops_path.with_name(clean_filename(sops_path) + COUNTERPART_SUFFIX)


def update_counterpart_file(
    path: Path,
    storage_root: str,
    keys: Sequence[str],
) -> bool:
    """カウンターパートの各キーの値を Vault 参照に書き換える。

    ファイルが存在しなければ何もせず False を返す。
    元のキー順序とインデント幅は維持される（コメントは維持されない）。
    """
    if not path.exists():
        return False

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise VaultImportError(
            code=VaultImportErrorCodes.COUNTERPART_IO,
            message=f"Failed to read counterpart file: {path}",
            cause=e,
        ) from e

    indent = detect_indent(text)
    try:
        root = parse_document(text)
    except yaml.YAMLError as e:
        raise VaultImportError(
            code=VaultImportErrorCodes.COUNTERPART_IO,
            message=f"Failed to parse counterpart YAML: {path}",
            cause=e,
        ) from e

    if root is None or not is_mapping(root):
        kind = "empty document" if root is None else root.id
        raise VaultImportError(
            code=VaultImportErrorCodes.COUNTERPART_SHAPE,
            message=f"Expected YAML mapping at root of {path}, got {kind}",
        )

    patch_document(root, storage_root, keys)

    try:
        path.write_text(emit_document(root, indent), encoding="utf-8")
    except (OSError, yaml.YAMLError) as e:
        raise VaultImportError(
            code=VaultImportErrorCodes.COUNTERPART_IO,
            message=f"Failed to write counterpart file: {path}",
            cause=e,
        ) from e
    return True


def preview_counterpart(path: Path, storage_root: str, keys: Sequence[str]) -> list[str]:
    """ドライラン時に行われるはずの更新内容を返す。"""
    if not path.exists():
        return [f"[dry-run] Counterpart file {path} does not exist, skipping"]
    lines = [f"[dry-run] Would update {path} with vault references:"]
    lines.extend(f"  {key}: {build_reference(storage_root, key)}" for key in keys)
    return lines
