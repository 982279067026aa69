from io import BytesIO
from pathlib import Path

import pytest

from s3etag.domain.services.chunked_digest import InvalidChunkSizeError, compute_with_chunk_size
from s3etag.infrastructure.storage.checksum import EtagCalculator


def test_etag_from_stream(tmp_path: Path) -> None:
    calculator = EtagCalculator(chunk_size=4, read_size=3)
    digest = calculator.from_stream(BytesIO(b"hello world"))

    assert digest.parts == 3
    assert digest == compute_with_chunk_size(b"hello world", 4)

    file_path = tmp_path / "data.bin"
    file_path.write_bytes(b"hello world")

    assert calculator.from_path(file_path) == digest


def test_etag_from_path_known_vector(tmp_path: Path) -> None:
    file_path = tmp_path / "hello.txt"
    file_path.write_bytes(b"hello\n")

    digest = EtagCalculator().from_path(file_path)

    assert str(digest) == "6a6d8d4533507d490ab007dfe8314ab7-1"


@pytest.mark.parametrize("length", [0, 1, 15, 16, 17, 64, 100])
@pytest.mark.parametrize("workers", [2, 3])
def test_parallel_hashing_matches_serial(tmp_path: Path, length: int, workers: int) -> None:
    data = bytes((i * 31) % 256 for i in range(length))
    file_path = tmp_path / "data.bin"
    file_path.write_bytes(data)

    serial = EtagCalculator(chunk_size=16, read_size=5).from_path(file_path)
    parallel = EtagCalculator(chunk_size=16, workers=workers).from_path(file_path)

    assert parallel == serial
    assert parallel == compute_with_chunk_size(data, 16)


def test_calculator_validation() -> None:
    with pytest.raises(InvalidChunkSizeError):
        EtagCalculator(chunk_size=0)
    with pytest.raises(ValueError):
        EtagCalculator(chunk_size=4, read_size=0)
    with pytest.raises(ValueError):
        EtagCalculator(chunk_size=4, workers=0)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        EtagCalculator(chunk_size=4).from_path(tmp_path / "missing.bin")
