#!/usr/bin/env python
"""Render a QR code locally through the same pipeline the API uses."""
from __future__ import annotations

import argparse
import asyncio
from pathlib import Path

from qrstudio.config import get_settings
from qrstudio.services.fetcher import get_logo_fetcher
from qrstudio.services.pipeline import render_png
from qrstudio.services.validator import ValidationError, validate


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample QR code PNG")
    parser.add_argument("--url", default="https://google.com")
    parser.add_argument("--color", default="#6366f1")
    parser.add_argument("--bg-color", dest="bg_color", default=None)
    parser.add_argument("--size", default="400")
    parser.add_argument("--logo", default=None, help="https URL of a logo")
    parser.add_argument("-o", "--out", type=Path, default=Path("test-qr.png"))
    args = parser.parse_args()

    try:
        req = validate(
            {
                "url": args.url,
                "color": args.color,
                "bgColor": args.bg_color,
                "size": args.size,
                "logo": args.logo,
            }
        )
    except ValidationError as exc:
        parser.error(exc.message)

    png = asyncio.run(render_png(req, get_logo_fetcher()))
    args.out.write_bytes(png)

    settings = get_settings()
    print("Content-Type: image/png")
    print(f"Cache-Control: public, max-age={settings.cache_max_age_seconds}")
    print(f"Generated {req.size}x{req.size} QR code ({len(png)} bytes) -> {args.out}")


if __name__ == "__main__":
    main()
