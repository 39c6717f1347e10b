"""
Tests for the argument builders of each tool.
"""

from pathlib import Path

import pytest

from pdfiron.infra.config.schemas import ColorMode
from pdfiron.pipeline.cleanup.tools import build_unpaper_args, output_paths
from pdfiron.pipeline.ocr.tools import build_tesseract_args
from pdfiron.pipeline.rasterize.tools import build_convert_args, color_mode_args


class TestConvertArgs:

    def test_bitonal_page(self):
        args = build_convert_args(
            "/w/input.pdf[0]", "/w/a_0000.pbm",
            resolution=300,
            color_mode=ColorMode.BITONAL,
        )

        assert args == [
            "-units", "PixelsPerInch",
            "-type", "Bilevel",
            "-density", "300x300",
            "/w/input.pdf[0]", "/w/a_0000.pbm",
        ]

    def test_user_options_come_before_paths(self):
        args = build_convert_args(
            Path("/w/input.pdf[2]"), Path("/w/a_0002.pgm"),
            resolution=150,
            color_mode=ColorMode.GRAYSCALE,
            extra=["-contrast-stretch", "1%"],
        )

        assert args[-4:] == ["-contrast-stretch", "1%", "/w/input.pdf[2]", "/w/a_0002.pgm"]
        assert args[args.index("-density") + 1] == "150x150"

    def test_without_color_mode(self):
        args = build_convert_args(
            "b_a_0000.pbm", "c_b_a_0000_%03d.tiff",
            resolution=300,
            settings=["-depth", "8", "-alpha", "Off"],
        )

        assert args == [
            "-units", "PixelsPerInch",
            "-density", "300x300",
            "-depth", "8", "-alpha", "Off",
            "b_a_0000.pbm", "c_b_a_0000_%03d.tiff",
        ]

    @pytest.mark.parametrize("mode", list(ColorMode))
    def test_every_mode_has_flags(self, mode):
        assert color_mode_args(mode)

    def test_grayscale_flags(self):
        assert color_mode_args(ColorMode.GRAYSCALE)[:2] == ["-colorspace", "gray"]


class TestUnpaperArgs:

    def test_minimal(self):
        args = build_unpaper_args("a_0000.pbm", ["b_a_0000.pbm"])

        assert args == ["--overwrite", "a_0000.pbm", "b_a_0000.pbm"]

    def test_all_options(self):
        args = build_unpaper_args(
            Path("a_0001.pgm"),
            [Path("b_a_0001_1.pgm"), Path("b_a_0001_2.pgm")],
            layout="double",
            output_pages=2,
            disable_filters=["blackfilter", "deskew"],
            extra=["--pre-rotate", "90"],
        )

        assert args == [
            "--overwrite",
            "--layout", "double",
            "--output-pages", "2",
            "--no-blackfilter", "--no-deskew",
            "--pre-rotate", "90",
            "a_0001.pgm", "b_a_0001_1.pgm", "b_a_0001_2.pgm",
        ]

    @pytest.mark.parametrize("pages", [None, 1])
    def test_single_output_page(self, pages):
        output = Path("/w/b_a_0003.pgm")
        assert output_paths(output, pages) == [output]

    def test_two_output_pages(self):
        assert output_paths(Path("/w/b_a_0003.pgm"), 2) == [
            Path("/w/b_a_0003_1.pgm"),
            Path("/w/b_a_0003_2.pgm"),
        ]


class TestTesseractArgs:

    def test_pdf_suffix_is_stripped(self):
        args = build_tesseract_args(
            Path("/w/c_b_a_0000_000.tiff"),
            Path("/w/d_c_b_a_0000_000.pdf"),
        )

        assert args == ["-l", "eng", "/w/c_b_a_0000_000.tiff", "/w/d_c_b_a_0000_000", "pdf"]

    def test_language_and_options(self):
        args = build_tesseract_args(
            "c.tiff", Path("d.pdf"),
            language="deu+eng",
            extra=["--psm", "1"],
        )

        assert args == ["-l", "deu+eng", "--psm", "1", "c.tiff", "d", "pdf"]
