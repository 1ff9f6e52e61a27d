from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from typing import List, Optional

from .analysis import capacity_report, psnr
from .errors import StegoError
from .files import decode_file, encode_file, load_image


def _cmd_encode(args) -> None:
    if args.figdir:
        os.makedirs(args.figdir, exist_ok=True)

    info = encode_file(args.image, args.secret, args.output, bits=args.bits)

    if args.figdir or args.report:
        cover = load_image(args.image)
        stego = load_image(args.output)
        info['psnr'] = psnr(cover, stego)
        if args.figdir:
            from .viz import plot_histograms, plot_low_bit_planes
            plot_histograms(cover, stego, os.path.join(args.figdir, 'hist.png'))
            plot_low_bit_planes(cover, stego, args.bits, os.path.join(args.figdir, 'low_bits.png'))
        if args.report:
            with open(args.report, 'w', encoding='utf-8') as f:
                json.dump(info, f, ensure_ascii=False, indent=2)

    print(f"Wrote stego: {info['output']} ({info['format']})")
    print(f"Used chunks = {info['used_chunks']}/{info['capacity_chunks']} at {info['bits']} bits")


def _cmd_decode(args) -> None:
    n = decode_file(args.image, args.output, bits=args.bits)
    print(f"Wrote secret: {args.output} ({n} bytes)")


def _cmd_capacity(args) -> None:
    rows = capacity_report(load_image(args.image))
    for row in rows:
        print(f"bits={row['bits']}  chunks/byte={row['chunks_per_byte']}  capacity={row['capacity_bytes']} B")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='bitstego', description="Picture secret steganography encoder/decoder")
    ap.add_argument('-b', '--bits', type=int, default=2, help='low bits per image byte (1-8)')
    ap.add_argument('-v', '--verbose', action='store_true', help='debug logging')
    sub = ap.add_subparsers(dest='command', required=True)

    enc = sub.add_parser('encode', help='hide a file inside an image')
    enc.add_argument('image', help='cover image')
    enc.add_argument('secret', help='file to hide')
    enc.add_argument('output', nargs='?', default='stego.png', help='stego image path')
    enc.add_argument('--report', default=None, help='optional JSON report path')
    enc.add_argument('--figdir', default=None, help='optional directory to save figures')
    enc.set_defaults(func=_cmd_encode)

    dec = sub.add_parser('decode', help='recover a hidden file')
    dec.add_argument('image', help='stego image')
    dec.add_argument('output', nargs='?', default='extracted.txt', help='recovered secret path')
    dec.set_defaults(func=_cmd_decode)

    cap = sub.add_parser('capacity', help='show capacity for every bit width')
    cap.add_argument('image', help='cover image')
    cap.set_defaults(func=_cmd_capacity)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
    )
    try:
        args.func(args)
    except (StegoError, OSError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
