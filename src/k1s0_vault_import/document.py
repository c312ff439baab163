"""YAML ドキュメントツリーの読み書き

ツリーは PyYAML のノードグラフ（yaml.compose の結果）をそのまま使う。
MappingNode.value は (キーノード, 値ノード) の順序付きリストで、
ScalarNode.value は元のテキストとタグを保持するため型変換による書式の変化が起きない。

エイリアスは compose で共有ノードになるため、エイリアス経由の値にはキーノード側に
印を付け、アンカー名はノードに記録して出力時にそのまま使う。
"""

from __future__ import annotations

from typing import Any

import yaml

DEFAULT_INDENT = 2

STR_TAG = "tag:yaml.org,2002:str"
MAP_TAG = "tag:yaml.org,2002:map"

# 長いスカラーを折り返さない
_UNLIMITED_WIDTH = 1 << 16

_ALIAS_VALUE_ATTR = "k1s0_alias_value"
_ANCHOR_ATTR = "k1s0_anchor"

# シーケンス要素の "- " の幅
_SEQUENCE_ITEM_WIDTH = 2


class _DocumentLoader(yaml.SafeLoader):
    """アンカー名とエイリアスの出現位置を記録するローダー。"""

    def compose_node(self, parent: yaml.Node | None, index: Any) -> yaml.Node:
        event = self.peek_event()
        node = super().compose_node(parent, index)
        if isinstance(event, yaml.AliasEvent):
            if isinstance(parent, yaml.MappingNode) and isinstance(index, yaml.Node):
                setattr(index, _ALIAS_VALUE_ATTR, True)
        elif event.anchor is not None:
            setattr(node, _ANCHOR_ATTR, event.anchor)
        return node


class _DocumentDumper(yaml.SafeDumper):
    """元のインデントとアンカー名を再現するダンパー。

    ブロックシーケンスは親キーより 1 段深くインデントし、シーケンス要素内の
    コレクションは "- " の直後の列に揃える。
    """

    def increase_indent(self, flow: bool = False, indentless: bool = False) -> None:
        if not flow and self.sequence_context and self.indent is not None:
            self.indents.append(self.indent)
            self.indent += _SEQUENCE_ITEM_WIDTH
            return
        super().increase_indent(flow, False)

    def anchor_node(self, node: yaml.Node) -> None:
        first_visit = node not in self.anchors
        super().anchor_node(node)
        source_anchor = getattr(node, _ANCHOR_ATTR, None)
        if first_visit and source_anchor is not None:
            self.anchors[node] = source_anchor


def detect_indent(text: str) -> int:
    """テキストで使われているインデント幅を推定する。

    先頭から見て最初にインデントされた行の先頭空白文字数を返す。
    タブも 1 文字として数える。見つからなければ DEFAULT_INDENT。
    """
    for line in text.split("\n"):
        content = line.lstrip(" \t")
        if content.strip() and len(content) < len(line):
            return len(line) - len(content)
    return DEFAULT_INDENT


def parse_document(text: str) -> yaml.Node | None:
    """YAML テキストをノードツリーに変換する。空ドキュメントは None。"""
    return yaml.compose(text, Loader=_DocumentLoader)


def emit_document(node: yaml.Node, indent: int = DEFAULT_INDENT) -> str:
    """ノードツリーを指定インデント幅で YAML テキストに戻す。"""
    text: str = yaml.serialize(
        node,
        Dumper=_DocumentDumper,
        indent=indent,
        width=_UNLIMITED_WIDTH,
        allow_unicode=True,
    )
    return text


def is_mapping(node: Any) -> bool:
    return isinstance(node, yaml.MappingNode)


def key_text(node: yaml.Node) -> str | None:
    """マッピングキーの文字列を返す。スカラー以外のキーは None。"""
    if isinstance(node, yaml.ScalarNode):
        return str(node.value)
    return None


def new_scalar(value: str, style: str | None = None) -> yaml.ScalarNode:
    return yaml.ScalarNode(STR_TAG, value, style=style)


def new_mapping() -> yaml.MappingNode:
    return yaml.MappingNode(MAP_TAG, [], flow_style=False)


def is_alias_value(key_node: yaml.Node) -> bool:
    """このキーの値がエイリアス（*name）で書かれていたか。"""
    return bool(getattr(key_node, _ALIAS_VALUE_ATTR, False))
