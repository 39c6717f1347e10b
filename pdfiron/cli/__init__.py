import argparse
import sys
from typing import List, Optional

from pdfiron import __version__
from pdfiron.infra.config.schemas import BinaryNames, UNPAPER_FILTERS
from pdfiron.cli.run import cmd_run


def create_parser():
    parser = argparse.ArgumentParser(
        prog='pdfiron',
        description='pdfiron - clean up scanned PDFs and make them searchable',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  pdfiron scan.pdf                          # writes scan-ironed.pdf
  pdfiron scan.pdf -o clean.pdf --gray      # grayscale output
  pdfiron scan.pdf --layout double --output-pages 2
  pdfiron scan.pdf -l deu --tesseract-threads 4
  pdfiron scan.pdf --disable-tesseract --step   # inspect the cleanup result
  pdfiron scan.pdf --convert-binary magick  # ImageMagick 7
"""
    )
    parser.add_argument('input', metavar='INPUT', help='Scanned PDF to process')
    parser.add_argument('-o', '--output', help='Output file (default: <input>-ironed.pdf)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    color = parser.add_mutually_exclusive_group()
    color.add_argument('--gray', dest='color_mode', action='store_const', const='grayscale',
                       help='Grayscale output')
    color.add_argument('--rgb', dest='color_mode', action='store_const', const='truecolor',
                       help='Color output')
    color.add_argument('--bitonal', dest='color_mode', action='store_const', const='bitonal',
                       help='Black and white output (default)')

    # Resolution stays a string so validation reports it like any other config error
    parser.add_argument('-r', '--resolution', help='Rasterization resolution in DPI (default: 300)')
    parser.add_argument('--convert-options', help='Extra arguments for convert')

    unpaper = parser.add_argument_group('unpaper')
    unpaper.add_argument('--disable-unpaper', action='store_true', default=None,
                         help='Skip the cleanup step')
    unpaper.add_argument('--layout', help='unpaper sheet layout (single, double, none)')
    unpaper.add_argument('--output-pages', type=int, help='Pages per output sheet (1 or 2)')
    unpaper.add_argument('--no-filter', dest='unpaper_disable_filters', action='append',
                         choices=UNPAPER_FILTERS, metavar='FILTER',
                         help=f'Disable an unpaper filter, repeatable ({", ".join(UNPAPER_FILTERS)})')
    unpaper.add_argument('--unpaper-options', help='Extra arguments for unpaper')

    tesseract = parser.add_argument_group('tesseract')
    tesseract.add_argument('--disable-tesseract', action='store_true', default=None,
                           help='Skip OCR (no output document is written)')
    tesseract.add_argument('-l', '--lang', dest='language', help='OCR language (default: eng)')
    tesseract.add_argument('--tesseract-options', help='Extra arguments for tesseract')
    tesseract.add_argument('--tesseract-threads', type=int,
                           help='Parallel tesseract processes (default: 2)')

    parser.add_argument('-j', '--workers', type=int,
                        help='Parallel convert/unpaper processes (default: CPU count)')
    parser.add_argument('-s', '--step', action='store_true', default=None,
                        help='Pause after each step to inspect intermediate files')
    parser.add_argument('-v', '--verbose', action='store_true', default=None,
                        help='Debug output')
    parser.add_argument('--no-progress', dest='show_progress', action='store_false', default=None,
                        help='Hide progress bars')
    parser.add_argument('--config', help='YAML config file')
    parser.add_argument('--log-dir', help='Also write JSON logs to this directory')

    binaries = parser.add_argument_group('binaries')
    for tool in BinaryNames.tools():
        binaries.add_argument(
            f'--{tool}-binary',
            dest=f'{tool}_binary',
            metavar='NAME',
            help=f'Alternative name of the {tool} executable'
        )

    parser.set_defaults(func=cmd_run)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = create_parser()
    args = parser.parse_args(argv)
    return args.func(args)


def run():
    sys.exit(main())
