"""
ファイル・ストリーム向け ETag 計算。
"""

from __future__ import annotations

import os
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import BinaryIO

from s3etag.domain.services.chunked_digest import (
    DEFAULT_CHUNK_SIZE,
    ChunkedDigestContext,
    md5_digest,
)
from s3etag.domain.value_objects.digest import Digest

DEFAULT_READ_SIZE = 1024 * 1024


class EtagCalculator:
    """
    チャンク分割 MD5 を計算するユーティリティ。

    ``workers`` が 2 以上の場合、``from_path`` はチャンク単位の MD5 をスレッドプールで
    並列に計算する。結果は入力順に連結されるため、逐次計算と同一のダイジェストとなる。
    """

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        *,
        read_size: int = DEFAULT_READ_SIZE,
        workers: int = 1,
    ) -> None:
        # chunk_size の検証は ChunkedDigestContext に委ねる
        ChunkedDigestContext(chunk_size)
        if read_size <= 0:
            raise ValueError("read_size は正の値である必要があります。")
        if workers <= 0:
            raise ValueError("workers は 1 以上である必要があります。")
        self._chunk_size = chunk_size
        self._read_size = read_size
        self._workers = workers

    @property
    def chunk_size(self) -> int:
        return self._chunk_size

    @property
    def workers(self) -> int:
        return self._workers

    def from_path(self, path: Path) -> Digest:
        with path.open("rb") as fh:
            size_hint = os.fstat(fh.fileno()).st_size
            if self._workers > 1:
                return self._from_stream_parallel(fh)
            return self.from_stream(fh, size_hint=size_hint)

    def from_stream(self, stream: BinaryIO, *, size_hint: int | None = None) -> Digest:
        context = ChunkedDigestContext(self._chunk_size, size_hint=size_hint)
        while True:
            block = stream.read(self._read_size)
            if not block:
                break
            context.consume(block)
        return context.finalize()

    def _from_stream_parallel(self, stream: BinaryIO) -> Digest:
        max_in_flight = self._workers * 2
        pending: deque[Future[bytes]] = deque()
        combined = bytearray()
        parts = 0

        with ThreadPoolExecutor(max_workers=self._workers, thread_name_prefix="s3etag") as executor:
            while True:
                chunk = _read_exactly(stream, self._chunk_size)
                if not chunk and parts + len(pending) > 0:
                    break
                pending.append(executor.submit(md5_digest, chunk))
                if len(pending) >= max_in_flight:
                    combined += pending.popleft().result()
                    parts += 1
                if len(chunk) < self._chunk_size:
                    break

            while pending:
                combined += pending.popleft().result()
                parts += 1

        return Digest(hash=md5_digest(combined), parts=parts)


def _read_exactly(stream: BinaryIO, size: int) -> bytes:
    """EOF に達しない限り size バイトを読み切る。"""

    buffer = bytearray()
    while len(buffer) < size:
        block = stream.read(size - len(buffer))
        if not block:
            break
        buffer += block
    return bytes(buffer)
