"""ネストした辞書をドット区切りキーの辞書に平坦化する"""

from __future__ import annotations

import json
from typing import Any


def flatten(data: dict[Any, Any]) -> dict[str, Any]:
    """ネストした辞書をドット区切りキーの 1 階層の辞書に変換する。

    例: {"admin": {"oauth2": {"clientID": "x"}}} -> {"admin.oauth2.clientID": "x"}

    辞書以外の値（リストを含む）は葉として扱い、再帰しない。
    """
    result: dict[str, Any] = {}
    _flatten(data, "", result)
    return result


def _flatten(data: dict[Any, Any], prefix: str, out: dict[str, Any]) -> None:
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, dict):
            _flatten(value, full_key, out)
        else:
            out[full_key] = value


def stringify_value(value: Any) -> str:
    """Vault に書き込むための文字列表現を返す。"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"), default=str)
    return str(value)
