"""
チャンク分割 MD5 ダイジェストを表す値オブジェクト。
"""

from __future__ import annotations

import re
from dataclasses import dataclass

HASH_LENGTH = 16

_CANONICAL_PATTERN = re.compile(r"^(?P<hash>[0-9a-fA-F]{32})-(?P<parts>[1-9][0-9]*)$")


class InvalidDigestFormatError(ValueError):
    """ETag 文字列が正規形式ではない。"""


@dataclass(frozen=True)
class Digest:
    """
    ハッシュのハッシュとチャンク数の組。

    文字列表現は S3 のマルチパート ETag と同じ ``<32桁の16進>-<parts>`` 形式となる。
    等価比較・ハッシュ値は ``hash`` と ``parts`` の両方を用いる。

    Attributes:
        hash: 結合済みチャンクハッシュに対する MD5 (16 バイト)。
        parts: ハッシュ化したチャンク数。
    """

    hash: bytes
    parts: int

    def __post_init__(self) -> None:
        if not isinstance(self.hash, (bytes, bytearray)):
            raise ValueError("hash は bytes である必要があります。")
        if len(self.hash) != HASH_LENGTH:
            raise ValueError(f"hash は {HASH_LENGTH} バイトである必要があります。")
        if isinstance(self.hash, bytearray):
            object.__setattr__(self, "hash", bytes(self.hash))
        if isinstance(self.parts, bool) or not isinstance(self.parts, int):
            raise ValueError("parts は int である必要があります。")
        if self.parts < 1:
            raise ValueError("parts は 1 以上である必要があります。")

    @classmethod
    def parse(cls, text: str) -> "Digest":
        """
        正規形式の ETag 文字列から Digest を復元する。

        Args:
            text: ``<32桁の16進>-<parts>`` 形式の文字列。大文字の16進も受け付ける。

        Raises:
            InvalidDigestFormatError: 形式が不正な場合。
        """

        match = _CANONICAL_PATTERN.match(text)
        if match is None:
            raise InvalidDigestFormatError(f"ETag の形式が不正です: {text!r}")
        return cls(hash=bytes.fromhex(match.group("hash")), parts=int(match.group("parts")))

    def hexdigest(self, *, uppercase: bool = False) -> str:
        """サフィックスを含まない16進表現を返す。"""

        value = self.hash.hex()
        return value.upper() if uppercase else value

    def to_etag(self, *, uppercase: bool = False) -> str:
        return f"{self.hexdigest(uppercase=uppercase)}-{self.parts}"

    def __str__(self) -> str:
        return self.to_etag()

    def __format__(self, format_spec: str) -> str:
        if format_spec in ("", "x"):
            return self.to_etag()
        if format_spec == "X":
            return self.to_etag(uppercase=True)
        raise ValueError(f"Digest がサポートしない書式指定です: {format_spec!r}")

    def __bytes__(self) -> bytes:
        return self.hash
