import argparse
import sys
from pathlib import Path
from typing import Dict, List, Optional

from .config import CodecConfig, load_config, save_config
from .errors import BaseEncodingError
from .history import format_record, log_event, read_history
from .registry import registry
from .utils import decode_bytes_best_effort, unescape


def _config_path(args: argparse.Namespace) -> Optional[Path]:
    return Path(args.config) if args.config else None


def _resolve_settings(args: argparse.Namespace) -> CodecConfig:
    """Settings file values, overridden by whatever was given on the command line."""
    config = load_config(_config_path(args))
    if args.variant:
        config.variant = args.variant
        config.alphabet = ""
    if args.alphabet:
        config.alphabet = args.alphabet
    if args.case_insensitive:
        config.case_sensitive = False
    if args.no_padding:
        config.omit_padding = True
    if args.ignore_unknown:
        config.ignore_unknown = True
    if args.separator is not None:
        config.separator = unescape(args.separator)
    if args.interval is not None:
        config.interval = args.interval
    return config


def _load_input(args: argparse.Namespace) -> bytes:
    if args.in_file:
        with open(args.in_file, "rb") as fh:
            return fh.read()
    if args.text is None:
        return sys.stdin.buffer.read()
    return args.text.encode(args.encoding or "utf-8")


def _write_output(args: argparse.Namespace, output) -> Optional[str]:
    if args.out_file:
        if isinstance(output, bytes):
            with open(args.out_file, "wb") as fh:
                fh.write(output)
        else:
            with open(args.out_file, "w", encoding="utf-8") as fh:
                fh.write(output)
        return None
    return output


def _record(args: argparse.Namespace, config: CodecConfig, payload: Dict[str, object]) -> None:
    if args.no_history or not config.history:
        return
    log_event(
        action=args.command,
        payload={
            "variant": "custom" if config.alphabet else config.variant,
            "omit_padding": config.omit_padding,
            "ignore_unknown": config.ignore_unknown,
            "separator": config.separator or None,
            "interval": config.interval or None,
            "in_file": args.in_file,
            "out_file": args.out_file,
            **payload,
        },
    )


def _run_encode(args: argparse.Namespace) -> Optional[str]:
    config = _resolve_settings(args)
    encoding = config.build()
    data = _load_input(args)
    if args.from_hex:
        try:
            data = bytes.fromhex(data.decode("ascii"))
        except (UnicodeDecodeError, ValueError) as exc:
            raise argparse.ArgumentTypeError(f"Invalid hex input: {exc}") from None
    encoded = encoding.encode(data)
    _record(args, config, {"input_size": len(data), "output_size": len(encoded)})
    return _write_output(args, encoded)


def _run_decode(args: argparse.Namespace) -> Optional[str]:
    config = _resolve_settings(args)
    encoding = config.build()
    raw = _load_input(args)
    text = decode_bytes_best_effort(raw, preferred_encoding=args.encoding).rstrip("\r\n")
    decoded = encoding.decode(text)
    _record(args, config, {"input_size": len(raw), "output_size": len(decoded)})
    if args.to_hex:
        return _write_output(args, decoded.hex())
    if args.binary:
        if not args.out_file:
            sys.stdout.buffer.write(decoded)
            return None
        return _write_output(args, decoded)
    return _write_output(args, decode_bytes_best_effort(decoded, preferred_encoding=args.encoding))


def _run_variants(args: argparse.Namespace) -> str:
    lines = []
    for name, encoding in registry().items():
        alphabet = encoding.alphabet
        lines.append(
            f"{name:<10} bits={alphabet.bits_per_char} "
            f"block={alphabet.bytes_per_block}:{alphabet.chars_per_block} "
            f"padding={'yes' if alphabet.requires_padding else 'no'} "
            f"case={'sensitive' if alphabet.case_sensitive else 'insensitive'} "
            f"symbols={alphabet.symbols}"
        )
    return "\n".join(lines)


def _run_config(args: argparse.Namespace) -> str:
    path = _config_path(args)
    config = load_config(path)
    changed = False
    if args.variant is not None:
        config.variant = args.variant
        config.alphabet = ""
        changed = True
    if args.alphabet is not None:
        config.alphabet = args.alphabet
        changed = True
    if args.case_insensitive:
        config.case_sensitive = False
        changed = True
    if args.separator is not None:
        config.separator = unescape(args.separator)
        changed = True
    if args.interval is not None:
        config.interval = args.interval
        changed = True
    for field in ("omit_padding", "ignore_unknown", "history"):
        value = getattr(args, field)
        if value is not None:
            setattr(config, field, value == "on")
            changed = True

    # Refuse to persist settings that can not build an encoding.
    config.build()
    if changed:
        save_config(config, path)

    lines = [f"{key}: {value!r}" for key, value in config.to_dict().items()]
    if changed:
        lines.append("Configuration saved.")
    return "\n".join(lines)


def _run_history(args: argparse.Namespace) -> str:
    records = read_history(limit=args.limit)
    if not records:
        return "No history recorded."
    return "\n".join(format_record(record) for record in records)


def _add_codec_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("text", nargs="?", help="Input text (stdin if omitted and no --in-file).")
    parser.add_argument("--in-file", help="Read input from file.")
    parser.add_argument("--out-file", help="Write output to file instead of stdout.")
    parser.add_argument("--variant", choices=sorted(registry().keys()), help="Named RFC 4648 encoding.")
    parser.add_argument("--alphabet", help="Custom alphabet of 16, 32 or 64 symbols.")
    parser.add_argument(
        "--case-insensitive",
        action="store_true",
        help="Treat the custom alphabet as case-insensitive (symbols must be upper-case).",
    )
    parser.add_argument("--no-padding", action="store_true", help="Omit '=' padding.")
    parser.add_argument("--ignore-unknown", action="store_true", help="Skip characters outside the alphabet when decoding.")
    parser.add_argument("--separator", help="Separator text; backslash escapes such as \\n are honored.")
    parser.add_argument("--interval", type=int, help="Insert the separator every N output characters.")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="RFC 4648 Base16/32/64 encoder and decoder.")
    parser.add_argument(
        "--no-history", action="store_true", help="Do not record the operation in history."
    )
    parser.add_argument("--config", help="Settings file (default ~/.base_encoding.json).")
    parser.add_argument("--encoding", help="Character encoding of text input/output, default utf-8.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    encode_parser = subparsers.add_parser("encode", help="Encode bytes to text")
    _add_codec_args(encode_parser)
    encode_parser.add_argument("--from-hex", action="store_true", help="Input is hex, encode the bytes it denotes.")
    encode_parser.set_defaults(func=_run_encode)

    decode_parser = subparsers.add_parser("decode", help="Decode text to bytes")
    _add_codec_args(decode_parser)
    output_group = decode_parser.add_mutually_exclusive_group()
    output_group.add_argument("--to-hex", action="store_true", help="Print decoded bytes as hex.")
    output_group.add_argument("--binary", action="store_true", help="Emit raw decoded bytes.")
    decode_parser.set_defaults(func=_run_decode)

    variants_parser = subparsers.add_parser("variants", help="List the named encodings")
    variants_parser.set_defaults(func=_run_variants)

    config_parser = subparsers.add_parser("config", help="Show or update the settings file")
    config_parser.add_argument("--variant", choices=sorted(registry().keys()))
    config_parser.add_argument("--alphabet")
    config_parser.add_argument("--case-insensitive", action="store_true")
    config_parser.add_argument("--separator")
    config_parser.add_argument("--interval", type=int)
    config_parser.add_argument("--omit-padding", choices=["on", "off"])
    config_parser.add_argument("--ignore-unknown", choices=["on", "off"])
    config_parser.add_argument("--history", choices=["on", "off"])
    config_parser.set_defaults(func=_run_config)

    history_parser = subparsers.add_parser("history", help="Show recent operations")
    history_parser.add_argument("--limit", type=int, default=20, help="Number of records to show.")
    history_parser.set_defaults(func=_run_history)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        result = args.func(args)
    except (BaseEncodingError, argparse.ArgumentTypeError, OSError) as exc:
        parser.exit(1, f"{parser.prog}: error: {exc}\n")
    if result is not None:
        print(result)


if __name__ == "__main__":
    main()
