"""qrlogo CLI: generate, decode and verify QR codes."""

import argparse
import sys
from pathlib import Path

from qrlogo import __version__
from qrlogo.errors import QRLogoError
from qrlogo.logging import audit, get_logger, setup_logging

log = get_logger("cli")


def _parse_hex_color(s: str) -> tuple[int, int, int]:
    """Parse a hex colour string (with or without '#') to an RGB tuple."""
    s = s.lstrip("#")
    if len(s) != 6:
        raise argparse.ArgumentTypeError(f"expected a 6-digit hex colour, got {s!r}")
    try:
        return tuple(int(s[i : i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a 6-digit hex colour, got {s!r}") from None


def cmd_generate(args):
    """Generate a QR code, optionally with a logo."""
    from qrlogo.api import create_qrcode
    from qrlogo.config import LogoConfig, OutputFormat

    fmt = OutputFormat.parse(args.format) if args.format else None
    output = Path(args.output)
    if fmt is None:
        fmt = OutputFormat.JPEG if output.suffix.lower() in (".jpg", ".jpeg") else OutputFormat.PNG
    output.parent.mkdir(parents=True, exist_ok=True)

    config = LogoConfig(
        border_width=args.border,
        border_color=args.border_color,
        logo_fraction=args.logo_fraction,
    )
    data = create_qrcode(
        args.text,
        args.size,
        args.logo,
        config,
        image_format=fmt,
        error_correction=args.ecc,
    )
    output.write_bytes(data)
    print(f"Generated: {output} ({args.size}x{args.size}, {fmt.value}, {len(data)} bytes)")


def cmd_decode(args):
    """Decode a QR code image and print its text."""
    from qrlogo.api import decode_qrcode

    print(decode_qrcode(args.image))


def cmd_verify(args):
    """Run every decoder on an image."""
    from qrlogo.api import read_image
    from qrlogo.verify import verify

    results = verify(read_image(args.image), expected_data=args.expected)

    all_pass = True
    for r in results:
        status = "PASS" if r.success else "FAIL"
        if not r.success:
            all_pass = False
        print(f"  [{r.decoder:12s}] {status} | {r.decode_time_ms:6.1f}ms | {r.decoded_data or r.error}")

    sys.exit(0 if all_pass else 1)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="qrlogo", description="QR codes with a centred logo")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    parser.add_argument("-V", "--verbose", action="store_true", help="Enable DEBUG-level logging")
    parser.add_argument("--log-file", default=None, help="Write JSON logs to file")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # --- generate ---
    p_gen = subparsers.add_parser("generate", help="Generate a QR code")
    p_gen.add_argument("text", help="Text or URL to encode")
    p_gen.add_argument("-o", "--output", default="qrcode.png", help="Output file path")
    p_gen.add_argument("-s", "--size", type=int, default=400, help="Image edge length in pixels")
    p_gen.add_argument("-e", "--ecc", default="H", choices=["L", "M", "Q", "H"], help="Error correction level")
    p_gen.add_argument("--logo", default=None, help="Logo image to place in the centre")
    p_gen.add_argument("--border", type=int, default=5, help="Logo border width in pixels")
    p_gen.add_argument("--border-color", type=_parse_hex_color, default=(255, 255, 255),
                       help="Logo border colour (hex, e.g. 'ffffff')")
    p_gen.add_argument("--logo-fraction", type=int, default=5,
                       help="Logo edge as a fraction of the image edge (>= 2)")
    p_gen.add_argument("-f", "--format", default=None, choices=["png", "jpeg", "jpg"],
                       help="Output format (default: from extension, else png)")

    # --- decode ---
    p_dec = subparsers.add_parser("decode", help="Decode a QR code image")
    p_dec.add_argument("image", help="Path to QR code image")

    # --- verify ---
    p_ver = subparsers.add_parser("verify", help="Run every decoder on a QR code image")
    p_ver.add_argument("image", help="Path to QR code image")
    p_ver.add_argument("--expected", default=None, help="Expected decoded data (fails if mismatch)")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    level = "DEBUG" if args.verbose else "WARNING"
    setup_logging(level=level, log_file=args.log_file)
    audit("cli.start", logger=log, command=args.command, verbose=args.verbose)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    commands = {
        "generate": cmd_generate,
        "decode": cmd_decode,
        "verify": cmd_verify,
    }
    try:
        commands[args.command](args)
    except QRLogoError as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    audit("cli.done", logger=log, command=args.command)


if __name__ == "__main__":
    main()
