import argparse
import sys

import png_logging
from png_config import load_config
from png_errors import PngError
from png_funs import decode_file, encode_file, print_file, remove_file


def build_parser():
    parser = argparse.ArgumentParser(description="Hide messages in a PNG file.")
    parser.add_argument("--config", help="Path to a YAML config file")
    subparsers = parser.add_subparsers(dest="command")

    encode_parser = subparsers.add_parser("encode", help="Hide a message in a PNG file")
    encode_parser.add_argument("file_path", help="Path to the source PNG file")
    encode_parser.add_argument("chunk_type", help="Chunk type, 4 letters a-z | A-Z")
    encode_parser.add_argument("message", help="Message to hide")
    encode_parser.add_argument(
        "output_file_path",
        nargs="?",
        help="Output PNG path, the input file is overwritten when omitted",
    )

    decode_parser = subparsers.add_parser(
        "decode", help="Decode a hidden message from a PNG file"
    )
    decode_parser.add_argument("file_path", help="Path to the PNG file")
    decode_parser.add_argument("chunk_type", help="Chunk type, 4 letters a-z | A-Z")

    remove_parser = subparsers.add_parser(
        "remove", help="Remove a hidden message from a PNG file"
    )
    remove_parser.add_argument("file_path", help="Path to the PNG file")
    remove_parser.add_argument("chunk_type", help="Chunk type, 4 letters a-z | A-Z")

    print_parser = subparsers.add_parser("print", help="Print all chunks of a PNG file")
    print_parser.add_argument("file_path", help="Path to the PNG file")

    return parser


def run(args, cfg):
    if args.command == "encode":
        encode_file(args.file_path, args.chunk_type, args.message, args.output_file_path)
        print("Chunk written successfully.")
    elif args.command == "decode":
        print(decode_file(args.file_path, args.chunk_type))
    elif args.command == "remove":
        removed = remove_file(args.file_path, args.chunk_type)
        print(f"Removed chunk:\n{removed}")
    elif args.command == "print":
        for summary in print_file(args.file_path, cfg):
            print(summary)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        return 1

    try:
        cfg = load_config(args.config)
        png_logging.configure(cfg)
        run(args, cfg)
    except PngError as e:
        print(f"error ({e.kind}): {e}", file=sys.stderr)
        return e.exit_code
    except OSError as e:
        print(f"error (io): {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
