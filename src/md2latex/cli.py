"""Command-line interface for md2latex."""

from __future__ import annotations

import argparse
import sys
import time
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from md2latex.errors import LexError, ParseError

CONFIG_NAME = "md2latex.toml"


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path | None  # None reads stdin
    output_file: Path | None
    strict: bool
    standalone: bool
    documentclass: str
    packages: list[str]
    watch: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="md2latex",
        description="Convert Markdown to LaTeX",
    )
    p.add_argument("input", help="Input Markdown file ('-' for stdin)")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help=f"Config file (default: auto-discover {CONFIG_NAME})",
    )
    p.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on unterminated constructs instead of warning",
    )
    p.add_argument(
        "--standalone",
        action="store_true",
        default=None,
        help="Wrap output in a complete LaTeX document",
    )
    p.add_argument(
        "--documentclass",
        default=None,
        metavar="NAME",
        help="Document class for --standalone (default: article)",
    )
    p.add_argument(
        "--package",
        action="append",
        default=[],
        metavar="NAME",
        help="Extra \\usepackage for --standalone (repeatable)",
    )
    p.add_argument("--watch", action="store_true", help="Watch for changes and reconvert")
    p.add_argument("--debug", action="store_true", help="Dump tokens and AST to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Load a TOML config file, returning an empty dict on missing/absent file."""
    path = config_path if config_path is not None else input_dir / CONFIG_NAME

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = None if args.input == "-" else Path(args.input)
    input_dir = input_file.parent if input_file is not None else Path(".")
    if not input_dir.parts:
        input_dir = Path(".")

    config_path = Path(args.config) if args.config else None
    config = load_config(config_path, input_dir)

    strict = bool(config.get("strict", False))
    if args.strict is not None:
        strict = args.strict

    standalone = False
    documentclass = "article"
    packages: list[str] = []
    cfg_doc = config.get("document")
    if isinstance(cfg_doc, dict):
        standalone = bool(cfg_doc.get("standalone", False))
        cfg_class = cfg_doc.get("class")
        if isinstance(cfg_class, str):
            documentclass = cfg_class
        cfg_packages = cfg_doc.get("packages")
        if isinstance(cfg_packages, list):
            packages.extend(str(name) for name in cfg_packages)

    if args.standalone is not None:
        standalone = args.standalone
    if args.documentclass is not None:
        documentclass = args.documentclass
    packages.extend(args.package)

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        strict=strict,
        standalone=standalone,
        documentclass=documentclass,
        packages=packages,
        watch=args.watch,
        debug=args.debug,
    )


def _display_name(options: CliOptions) -> str:
    return str(options.input_file) if options.input_file is not None else "<stdin>"


def convert_source(source: str, options: CliOptions) -> str:
    """Lex, parse, and generate LaTeX, reporting lexer warnings to stderr."""
    from md2latex.debug import dump_ast, dump_tokens
    from md2latex.generator import generate
    from md2latex.lexer import Lexer
    from md2latex.parser import parse_tokens
    from md2latex.preamble import wrap_document

    lexer = Lexer(source, strict=options.strict)
    tokens = lexer.tokenize()
    for warning in lexer.warnings:
        print(warning.format(_display_name(options)), file=sys.stderr)

    doc = parse_tokens(tokens, source)

    if options.debug:
        dump_tokens(tokens)
        dump_ast(doc)

    latex = generate(doc)
    if options.standalone:
        latex = wrap_document(latex, options.documentclass, options.packages)
    return latex


def convert_file(options: CliOptions) -> str:
    """Read the input file (or stdin) and convert it."""
    if options.input_file is None:
        source = sys.stdin.read()
    else:
        source = options.input_file.read_text(encoding="utf-8")
    return convert_source(source, options)


def _write_output(latex: str, options: CliOptions) -> None:
    if options.output_file:
        options.output_file.write_text(latex, encoding="utf-8")
    else:
        sys.stdout.write(latex)
        if not latex.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()


def _read_error(options: CliOptions, exc: OSError | UnicodeDecodeError) -> str:
    if isinstance(exc, UnicodeDecodeError):
        reason = f"not valid UTF-8 (byte {exc.start})"
    else:
        reason = exc.strerror or str(exc)
    return f"error: cannot read {_display_name(options)}: {reason}"


def watch_loop(options: CliOptions) -> None:
    """Poll input file for changes, reconvert on each modification."""
    assert options.input_file is not None
    last_mtime = 0.0
    print(f"Watching {options.input_file} for changes...", file=sys.stderr)
    try:
        while True:
            try:
                mtime = options.input_file.stat().st_mtime
            except OSError:
                time.sleep(0.5)
                continue
            if mtime != last_mtime:
                last_mtime = mtime
                try:
                    latex = convert_file(options)
                except (OSError, UnicodeDecodeError) as exc:
                    print(_read_error(options, exc), file=sys.stderr)
                except (LexError, ParseError) as exc:
                    print(exc.format(_display_name(options)), file=sys.stderr)
                else:
                    _write_output(latex, options)
                    print(f"Converted {options.input_file}", file=sys.stderr)
            time.sleep(0.5)
    except KeyboardInterrupt:
        pass


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except tomllib.TOMLDecodeError as exc:
        print(f"error: invalid config file: {exc}", file=sys.stderr)
        return 2

    if options.watch:
        if options.input_file is None:
            print("error: --watch needs an input file, not stdin", file=sys.stderr)
            return 2
        watch_loop(options)
        return 0

    try:
        latex = convert_file(options)
    except (OSError, UnicodeDecodeError) as exc:
        print(_read_error(options, exc), file=sys.stderr)
        return 2
    except (LexError, ParseError) as exc:
        print(exc.format(_display_name(options)), file=sys.stderr)
        return 1

    _write_output(latex, options)
    return 0
