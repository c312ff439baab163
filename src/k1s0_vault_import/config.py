"""コマンドライン引数と環境変数からの設定解決"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .exceptions import VaultImportError, VaultImportErrorCodes
from .models import ImportConfig

ENV_VAULT_ADDR = "VAULT_ADDR"
ENV_VAULT_TOKEN = "VAULT_TOKEN"
ENV_VAULT_NAMESPACE = "VAULT_NAMESPACE"


def resolve_value(flag_value: str | None, env_var: str, environ: Mapping[str, str]) -> str:
    """フラグ値があればそれを、なければ環境変数の値を返す。"""
    if flag_value:
        return flag_value
    return environ.get(env_var, "")


def resolve_config(
    sops_file: str | Path,
    vault_path: str,
    environ: Mapping[str, str],
    *,
    vault_addr: str | None = None,
    vault_token: str | None = None,
    vault_namespace: str | None = None,
    **options: Any,
) -> ImportConfig:
    """ImportConfig を組み立てて検証する。

    優先順位: フラグ > 環境変数。環境変数は environ 引数からのみ参照する。
    dry_run でない場合は Vault アドレスとトークンが必須。
    """
    try:
        config = ImportConfig(
            sops_file=Path(sops_file),
            vault_path=vault_path,
            vault_addr=resolve_value(vault_addr, ENV_VAULT_ADDR, environ),
            vault_token=resolve_value(vault_token, ENV_VAULT_TOKEN, environ),
            vault_namespace=resolve_value(vault_namespace, ENV_VAULT_NAMESPACE, environ),
            **options,
        )
    except ValidationError as e:
        raise VaultImportError(
            code=VaultImportErrorCodes.CONFIG,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e

    if not config.dry_run:
        if not config.vault_addr:
            raise VaultImportError(
                code=VaultImportErrorCodes.CONFIG,
                message=f"Vault address required (--vault-addr or {ENV_VAULT_ADDR})",
            )
        if not config.vault_token:
            raise VaultImportError(
                code=VaultImportErrorCodes.CONFIG,
                message=f"Vault token required (--vault-token or {ENV_VAULT_TOKEN})",
            )
    return config
