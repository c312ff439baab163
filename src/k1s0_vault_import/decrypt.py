"""SOPS ファイルの復号とパース"""

from __future__ import annotations

import re
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Hashable
from pathlib import Path
from typing import Any

import yaml

from .exceptions import VaultImportError, VaultImportErrorCodes


_BOOL_TAG = "tag:yaml.org,2002:bool"
_INT_TAG = "tag:yaml.org,2002:int"
_FLOAT_TAG = "tag:yaml.org,2002:float"
_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"
_REPLACED_TAGS = (_BOOL_TAG, _INT_TAG, _FLOAT_TAG, _TIMESTAMP_TAG)


class SecretsLoader(yaml.SafeLoader):
    """YAML 1.2 コアスキーマ相当の暗黙型で読み込むローダー。

    yes/no/on/off や 1:20 のような YAML 1.1 固有の暗黙型とタイムスタンプは
    文字列のまま残す。マッピングキーは書かれた文字列をそのまま使う。
    """

    yaml_implicit_resolvers = {
        first: [(tag, regexp) for tag, regexp in resolvers if tag not in _REPLACED_TAGS]
        for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
    }

    def construct_mapping(self, node: yaml.MappingNode, deep: bool = False) -> dict[Any, Any]:
        self.flatten_mapping(node)
        mapping: dict[Any, Any] = {}
        for key_node, value_node in node.value:
            if isinstance(key_node, yaml.ScalarNode):
                key = key_node.value
            else:
                key = self.construct_object(key_node, deep=deep)
            if not isinstance(key, Hashable):
                raise yaml.constructor.ConstructorError(
                    "while constructing a mapping",
                    node.start_mark,
                    "found unhashable key",
                    key_node.start_mark,
                )
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


SecretsLoader.add_implicit_resolver(
    _BOOL_TAG,
    re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$"),
    list("tTfF"),
)
SecretsLoader.add_implicit_resolver(
    _INT_TAG,
    re.compile(r"^(?:[-+]?(?:0|[1-9][0-9]*)|0o[0-7]+|0x[0-9a-fA-F]+)$"),
    list("-+0123456789"),
)
SecretsLoader.add_implicit_resolver(
    _FLOAT_TAG,
    re.compile(
        r"^(?:[-+]?(?:\.[0-9]+|[0-9]+\.[0-9]*)(?:[eE][-+]?[0-9]+)?"
        r"|[-+]?[0-9]+[eE][-+]?[0-9]+"
        r"|[-+]?\.(?:inf|Inf|INF)"
        r"|\.(?:nan|NaN|NAN))$"
    ),
    list("-+.0123456789"),
)


class Decryptor(ABC):
    """復号器抽象基底クラス。"""

    @abstractmethod
    def decrypt(self, path: Path) -> bytes:
        """暗号化ファイルを復号して平文の YAML を返す。"""
        ...


class SopsDecryptor(Decryptor):
    """sops コマンドを呼び出す復号器。"""

    def __init__(self, binary: str = "sops") -> None:
        self._binary = binary

    def command(self, path: Path) -> list[str]:
        return [
            self._binary,
            "--decrypt",
            "--input-type",
            "yaml",
            "--output-type",
            "yaml",
            str(path),
        ]

    def decrypt(self, path: Path) -> bytes:
        try:
            result = subprocess.run(
                self.command(path),
                capture_output=True,
                check=True,
            )
        except FileNotFoundError as e:
            raise VaultImportError(
                code=VaultImportErrorCodes.DECRYPT,
                message=f"sops binary not found: {self._binary}",
                cause=e,
            ) from e
        except subprocess.CalledProcessError as e:
            stderr = e.stderr.decode("utf-8", errors="replace").strip()
            raise VaultImportError(
                code=VaultImportErrorCodes.DECRYPT,
                message=f"Failed to decrypt {path}: {stderr}",
                cause=e,
            ) from e
        return result.stdout


def parse_secrets(raw: bytes | str) -> dict[str, Any]:
    """復号済み YAML を SecretsLoader でパースする。ルートはマッピングでなければならない。"""
    try:
        data = yaml.load(raw, Loader=SecretsLoader)
    except yaml.YAMLError as e:
        raise VaultImportError(
            code=VaultImportErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {e}",
            cause=e,
        ) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise VaultImportError(
            code=VaultImportErrorCodes.INVALID_DOCUMENT,
            message=f"Expected YAML mapping at root, got {type(data).__name__}",
        )
    return data
