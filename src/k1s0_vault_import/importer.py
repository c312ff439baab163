"""SOPS ファイルから Vault へのインポート処理"""

from __future__ import annotations

from typing import Any

import structlog

from .counterpart import preview_counterpart, update_counterpart_file
from .decrypt import Decryptor, parse_secrets
from .exceptions import VaultImportError
from .flatten import flatten, stringify_value
from .logger import new_logger
from .models import ImportConfig, ImportResult, VaultStoreConfig
from .preview import render_dry_run
from .store import HttpVaultKvStore, SecretStore


def make_store(config: ImportConfig) -> HttpVaultKvStore:
    """ImportConfig から Vault KV v2 ストアを生成する。"""
    return HttpVaultKvStore(
        VaultStoreConfig(
            address=config.vault_addr,
            token=config.vault_token,
            mount_path=config.mount_path,
            namespace=config.vault_namespace,
            timeout_seconds=config.timeout_seconds,
        )
    )


class SecretImporter:
    """復号・平坦化・書き込み・カウンターパート更新を順に行う。

    書き込みはキー単位でトランザクションを持たない。途中で失敗した場合、
    それまでに書き込まれたキーはストアに残る。
    """

    def __init__(
        self,
        config: ImportConfig,
        decryptor: Decryptor,
        store: SecretStore | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._config = config
        self._decryptor = decryptor
        self._store = store
        self._logger = logger or new_logger(level=config.log_level, format=config.log_format)

    @property
    def config(self) -> ImportConfig:
        return self._config

    def load_secrets(self) -> dict[str, Any]:
        """SOPS ファイルを復号して平坦化した辞書を返す。"""
        raw = self._decryptor.decrypt(self._config.sops_file)
        secrets = flatten(parse_secrets(raw))
        self._logger.debug("secrets loaded", file=str(self._config.sops_file), count=len(secrets))
        return secrets

    def preview(self, secrets: dict[str, Any]) -> list[str]:
        """ドライランの表示行を返す。"""
        lines = render_dry_run(self._config.reference_root, secrets)
        if self._config.update_counterpart:
            lines.extend(
                preview_counterpart(
                    self._config.counterpart_path,
                    self._config.reference_root,
                    sorted(secrets),
                )
            )
        return lines

    def write_secrets(self, secrets: dict[str, Any]) -> list[str]:
        """キーをソート順に 1 件ずつ書き込む。最初の失敗で中断する。"""
        if self._store is None:
            self._store = make_store(self._config)
        written: list[str] = []
        for key in sorted(secrets):
            path = f"{self._config.target_path}/{key}"
            self._store.write_secret(path, stringify_value(secrets[key]))
            self._logger.debug("secret written", mount=self._config.mount_path, path=path)
            written.append(key)
        return written

    def update_counterpart(self, keys: list[str]) -> bool:
        return update_counterpart_file(
            self._config.counterpart_path,
            self._config.reference_root,
            keys,
        )

    def run(self) -> ImportResult:
        """書き込みまでを実行する。カウンターパートの更新失敗は警告として記録する。"""
        secrets = self.load_secrets()
        result = ImportResult(reference_root=self._config.reference_root)
        result.written_keys = self.write_secrets(secrets)
        self._logger.info(
            "secrets imported",
            count=len(result.written_keys),
            path=f"{self._config.reference_root}/*",
        )

        if not self._config.update_counterpart:
            return result

        result.counterpart_path = self._config.counterpart_path
        try:
            result.counterpart_updated = self.update_counterpart(result.written_keys)
        except VaultImportError as e:
            result.counterpart_error = e
            self._logger.warning(
                "failed to update counterpart file",
                path=str(result.counterpart_path),
                error=str(e),
            )
        return result
