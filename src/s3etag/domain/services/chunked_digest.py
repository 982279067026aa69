"""
チャンク分割 MD5 (S3 マルチパート ETag) を逐次計算するアキュムレータ。

入力を ``chunk_size`` バイトごとに区切って MD5 を計算し、各チャンクのハッシュを
連結したバイト列の MD5 を最終ダイジェストとする。``consume`` の呼び出し方
(どのように入力を分割して渡すか) は結果に影響しない。
"""

from __future__ import annotations

import hashlib

from ..value_objects.digest import HASH_LENGTH, Digest

DEFAULT_CHUNK_SIZE = 8 * 1024 * 1024


class InvalidChunkSizeError(ValueError):
    """チャンクサイズが正の整数ではない。"""


class DigestFinalizedError(RuntimeError):
    """finalize 済みのコンテキストが再利用された。"""


def md5_digest(data: bytes | bytearray | memoryview) -> bytes:
    return hashlib.md5(data, usedforsecurity=False).digest()


class ChunkedDigestContext:
    """
    チャンク分割 MD5 の計算状態。

    ``consume`` (または ``write``) でバイト列を投入し、``finalize`` で一度だけ
    :class:`Digest` を取り出す。``write`` / ``flush`` を備えるため、
    ``shutil.copyfileobj`` などの書き込み先としてそのまま利用できる。

    Args:
        chunk_size: チャンクのバイト数。正の整数であること。
        size_hint: 入力全体の想定サイズ。チャンクハッシュ格納領域の事前確保にのみ使用する。

    Raises:
        InvalidChunkSizeError: chunk_size が不正な場合。
    """

    def __init__(self, chunk_size: int = DEFAULT_CHUNK_SIZE, *, size_hint: int | None = None) -> None:
        if isinstance(chunk_size, bool) or not isinstance(chunk_size, int) or chunk_size <= 0:
            raise InvalidChunkSizeError(f"chunk_size は正の整数である必要があります: {chunk_size!r}")
        if size_hint is not None and size_hint < 0:
            raise ValueError("size_hint は 0 以上である必要があります。")

        self._chunk_size = chunk_size
        self._current_chunk = bytearray()
        self._combined_hashes = bytearray(_estimate_parts(size_hint, chunk_size) * HASH_LENGTH)
        self._chunk_count = 0
        self._total_bytes = 0
        self._finalized = False

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def chunk_count(self) -> int:
        """確定済みのチャンク数。"""

        return self._chunk_count

    @property
    def total_bytes(self) -> int:
        """これまでに投入されたバイト数 (診断用)。"""

        return self._total_bytes

    @property
    def combined_hashes(self) -> bytes:
        return bytes(self._combined_hashes[: self._chunk_count * HASH_LENGTH])

    @property
    def finalized(self) -> bool:
        return self._finalized

    def consume(self, data: bytes | bytearray | memoryview) -> None:
        """
        バイト列を投入する。

        チャンク境界に達するたびにそのチャンクの MD5 を確定させる。
        未確定の端数は次回の呼び出しまたは ``finalize`` まで保持される。
        """

        self._ensure_open()
        view = memoryview(data).cast("B")
        self._total_bytes += view.nbytes
        offset = 0
        length = len(view)
        while offset < length:
            if not self._current_chunk and length - offset >= self._chunk_size:
                # バッファが空ならチャンク全体をコピーせずにハッシュ化する
                self._append_hash(view[offset : offset + self._chunk_size])
                offset += self._chunk_size
                continue

            space_left = self._chunk_size - len(self._current_chunk)
            to_take = min(length - offset, space_left)
            self._current_chunk += view[offset : offset + to_take]
            offset += to_take

            if len(self._current_chunk) == self._chunk_size:
                self._append_hash(self._current_chunk)
                self._current_chunk.clear()

    def finalize(self) -> Digest:
        """
        端数チャンクを確定させ、最終ダイジェストを返す。

        空入力は「0 バイトのチャンク 1 つ」として扱うため、parts は常に 1 以上となる。
        呼び出し後のコンテキストは再利用できない。

        Raises:
            DigestFinalizedError: 既に finalize 済みの場合。
        """

        self._ensure_open()
        if self._current_chunk or self._chunk_count == 0:
            self._append_hash(self._current_chunk)
            self._current_chunk.clear()

        self._finalized = True
        final_hash = md5_digest(self.combined_hashes)
        return Digest(hash=final_hash, parts=self._chunk_count)

    def copy(self) -> "ChunkedDigestContext":
        """現在の状態を複製した独立したコンテキストを返す。"""

        self._ensure_open()
        clone = ChunkedDigestContext(self._chunk_size)
        clone._current_chunk = bytearray(self._current_chunk)
        clone._combined_hashes = bytearray(self._combined_hashes)
        clone._chunk_count = self._chunk_count
        clone._total_bytes = self._total_bytes
        return clone

    def write(self, data: bytes | bytearray | memoryview) -> int:
        self.consume(data)
        return memoryview(data).nbytes

    def flush(self) -> None:
        pass

    def writable(self) -> bool:
        return True

    def _append_hash(self, chunk: bytes | bytearray | memoryview) -> None:
        chunk_hash = md5_digest(chunk)
        end = self._chunk_count * HASH_LENGTH
        if end < len(self._combined_hashes):
            self._combined_hashes[end : end + HASH_LENGTH] = chunk_hash
        else:
            self._combined_hashes += chunk_hash
        self._chunk_count += 1

    def _ensure_open(self) -> None:
        if self._finalized:
            raise DigestFinalizedError("finalize 済みのコンテキストは再利用できません。")


def compute(data: bytes | bytearray | memoryview) -> Digest:
    """既定のチャンクサイズ (8 MiB) でダイジェストを計算する。"""

    return compute_with_chunk_size(data, DEFAULT_CHUNK_SIZE)


def compute_with_chunk_size(data: bytes | bytearray | memoryview, chunk_size: int) -> Digest:
    """指定したチャンクサイズ (バイト) でダイジェストを計算する。"""

    context = ChunkedDigestContext(chunk_size)
    context.consume(data)
    return context.finalize()


def _estimate_parts(size_hint: int | None, chunk_size: int) -> int:
    if not size_hint:
        return 0
    return -(-size_hint // chunk_size)
