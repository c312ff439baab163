"""カウンターパート YAML ツリーへの Vault 参照の反映"""

from __future__ import annotations

from collections.abc import Iterable

import yaml

from .document import is_alias_value, is_mapping, key_text, new_mapping, new_scalar
from .reference import build_reference

# 置換時に引き継ぐクォートスタイル
_QUOTED_STYLES = ("'", '"')


def patch_document(
    root: yaml.MappingNode,
    storage_root: str,
    dotted_keys: Iterable[str],
) -> yaml.MappingNode:
    """各ドット区切りキーの値を Vault 参照文字列に置き換える（インプレース）。

    キーは与えられた順に 1 つずつ処理され、前のキーで作られた構造は
    後続のキーから見える。各階層での判定順序は次の通り:

    1. 残りパスを "." で連結したキーが完全一致すれば、その値を置換する。
    2. 先頭セグメントに一致するキーがあれば、最後のセグメントなら置換し、
       値がマッピングなら残りパスで再帰する。マッピング以外やエイリアスなら何もしない。
    3. 一致しなければ、同階層に "." を含むキーがあればフラットキーとして、
       なければネストしたマッピングとして末尾に追加する。
    """
    for dotted_key in dotted_keys:
        reference = build_reference(storage_root, dotted_key)
        _upsert(root, dotted_key.split("."), reference)
    return root


def _upsert(node: yaml.MappingNode, path: list[str], reference: str) -> None:
    if not is_mapping(node) or not path:
        return

    flat_key = ".".join(path)
    for index, (key_node, value_node) in enumerate(node.value):
        if key_text(key_node) == flat_key:
            node.value[index] = (key_node, _reference_scalar(reference, value_node))
            return

    for index, (key_node, value_node) in enumerate(node.value):
        if key_text(key_node) != path[0]:
            continue
        if len(path) == 1:
            node.value[index] = (key_node, _reference_scalar(reference, value_node))
        elif is_mapping(value_node) and not is_alias_value(key_node):
            _upsert(value_node, path[1:], reference)
        # マッピング以外の値とエイリアス先は書き換えない
        return

    if _has_flat_keys(node):
        node.value.append((new_scalar(flat_key), new_scalar(reference)))
    else:
        _append_nested(node, path, reference)


def _has_flat_keys(node: yaml.MappingNode) -> bool:
    """"." を含むキーがこの階層にあるか。"""
    for key_node, _ in node.value:
        text = key_text(key_node)
        if text is not None and "." in text:
            return True
    return False


def _append_nested(node: yaml.MappingNode, path: list[str], reference: str) -> None:
    for segment in path[:-1]:
        child = new_mapping()
        node.value.append((new_scalar(segment), child))
        node = child
    node.value.append((new_scalar(path[-1]), new_scalar(reference)))


def _reference_scalar(reference: str, previous: yaml.Node) -> yaml.ScalarNode:
    style = None
    if isinstance(previous, yaml.ScalarNode) and previous.style in _QUOTED_STYLES:
        style = previous.style
    return new_scalar(reference, style=style)
