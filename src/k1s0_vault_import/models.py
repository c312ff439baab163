"""設定・結果の型定義"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from .counterpart import clean_filename, counterpart_filename
from .exceptions import VaultImportError


class ImportConfig(BaseModel):
    """インポート実行時の設定。"""

    sops_file: Path
    vault_path: str = Field(min_length=1)
    vault_addr: str = ""
    vault_token: str = Field(default="", repr=False)
    vault_namespace: str = ""
    mount_path: str = Field(default="secret", min_length=1)
    dry_run: bool = False
    append_name: bool = False
    name_override: str = ""
    update_counterpart: bool = False
    sops_binary: str = "sops"
    timeout_seconds: float = Field(default=10.0, gt=0)
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "text"

    @property
    def target_path(self) -> str:
        """マウント配下の書き込み先パス。append_name 指定時はファイル名由来の名前を付与する。"""
        if not self.append_name:
            return self.vault_path
        name = self.name_override or clean_filename(self.sops_file)
        return f"{self.vault_path}/{name}"

    @property
    def reference_root(self) -> str:
        """参照文字列に埋め込むルートパス（マウントを含む）。"""
        return f"{self.mount_path}/{self.target_path}"

    @property
    def counterpart_path(self) -> Path:
        return counterpart_filename(self.sops_file)


@dataclass
class VaultStoreConfig:
    """Vault KV v2 接続設定。"""

    address: str
    token: str = field(repr=False)
    mount_path: str = "secret"
    namespace: str = ""
    timeout_seconds: float = 10.0


@dataclass
class ImportResult:
    """インポート結果。"""

    reference_root: str
    written_keys: list[str] = field(default_factory=list)
    counterpart_path: Path | None = None
    counterpart_updated: bool = False
    counterpart_error: VaultImportError | None = None
