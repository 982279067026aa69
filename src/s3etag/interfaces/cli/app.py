"""
Typer ベースの CLI。
"""

from __future__ import annotations

import typer

from .commands import etag


def create_cli() -> typer.Typer:
    app = typer.Typer(help="S3 マルチパート ETag 計算 CLI", add_completion=False)
    app.command("compute")(etag.compute)
    app.command("parse")(etag.parse)
    return app


def main() -> None:
    create_cli()(prog_name="s3etag")
