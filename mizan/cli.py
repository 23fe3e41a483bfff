#!/usr/bin/env python3
"""
Mizan command line.

Usage:
    mizan classify قول
    mizan derive قول فَاعِل
    mizan family رمي
    mizan decompose قَائِل --all
    mizan roots --prefix ق
    mizan schemes
    mizan serve --port 8000

The engine starts with the default schemes and sample roots unless
--no-defaults is given; --roots/--schemes import extra files first.
"""

import argparse
import logging
import sys
from typing import List, Optional

from .config import Config, setup_logging
from .engine import MorphologyEngine
from .importer import read_lines

logger = logging.getLogger(__name__)


def build_engine(config: Config) -> MorphologyEngine:
    """Engine with default data and any configured import files."""
    if config.load_defaults:
        engine = MorphologyEngine.with_defaults(config)
    else:
        engine = MorphologyEngine(config=config)
    if config.schemes_file:
        report = engine.import_schemes(read_lines(config.schemes_file))
        logger.info(f"Loaded schemes from {config.schemes_file}: {report}")
    if config.roots_file:
        report = engine.import_roots(read_lines(config.roots_file))
        logger.info(f"Loaded roots from {config.roots_file}: {report}")
    return engine


def cmd_classify(engine: MorphologyEngine, args) -> int:
    root = engine.classify(args.root)
    if not root.is_valid:
        print(f"Invalid root: {root.error}")
        return 1
    print(f"Root:     {' - '.join(root.letters)}")
    print(f"Category: {root.category.name_ar} ({root.category.name_en})")
    print(f"Hamza:    {'yes' if root.has_hamza else 'no'}")
    print(engine.explain(args.root))
    return 0


def cmd_derive(engine: MorphologyEngine, args) -> int:
    word = engine.derive_word(args.root, args.scheme)
    print(word.surface if word.success else word.message)
    return 0 if word.success else 1


def cmd_family(engine: MorphologyEngine, args) -> int:
    family = engine.derive_family(args.root)
    ok = True
    for word in family:
        if word.success:
            print(f"{word.scheme:<16} {word.surface}")
        else:
            ok = False
            print(f"{word.scheme or '-':<16} {word.message}")
    return 0 if ok else 1


def cmd_decompose(engine: MorphologyEngine, args) -> int:
    results = engine.decompose_all(args.word) if args.all else [engine.decompose(args.word)]
    results = [r for r in results if r is not None]
    if not results:
        print(f"No root and scheme produce {args.word}")
        return 1
    for r in results:
        print(f"{r.root:<8} {r.scheme:<16} {r.category.name_ar}")
    return 0


def cmd_roots(engine: MorphologyEngine, args) -> int:
    for root in engine.list_roots(args.prefix, args.offset, args.limit):
        print(root)
    return 0


def cmd_schemes(engine: MorphologyEngine, args) -> int:
    for scheme in engine.list_schemes():
        print(f"{scheme.name:<16} {scheme.rule}")
    return 0


def cmd_serve(engine: MorphologyEngine, args) -> int:
    import uvicorn
    from .web.main import create_app

    uvicorn.run(create_app(engine), host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='mizan', description='Arabic root and scheme morphology')
    parser.add_argument('--roots', type=str, default=None, help='File of roots to import (one per line)')
    parser.add_argument('--schemes', type=str, default=None, help='File of name|rule schemes to import')
    parser.add_argument('--no-defaults', action='store_true', help='Start without the default data')
    parser.add_argument('--log-level', type=str, default=None, help='Logging level (default: WARNING, MIZAN_LOG_LEVEL for serve)')

    sub = parser.add_subparsers(dest='command', required=True)

    p = sub.add_parser('classify', help='Classify a root')
    p.add_argument('root')
    p.set_defaults(func=cmd_classify)

    p = sub.add_parser('derive', help='Derive a word from a root and a scheme')
    p.add_argument('root')
    p.add_argument('scheme')
    p.set_defaults(func=cmd_derive)

    p = sub.add_parser('family', help='Derive a word for every scheme')
    p.add_argument('root')
    p.set_defaults(func=cmd_family)

    p = sub.add_parser('decompose', help='Find the root and scheme of a word')
    p.add_argument('word')
    p.add_argument('--all', action='store_true', help='List every matching pair')
    p.set_defaults(func=cmd_decompose)

    p = sub.add_parser('roots', help='List registered roots')
    p.add_argument('--prefix', type=str, default=None)
    p.add_argument('--offset', type=int, default=0)
    p.add_argument('--limit', type=int, default=None)
    p.set_defaults(func=cmd_roots)

    p = sub.add_parser('schemes', help='List registered schemes')
    p.set_defaults(func=cmd_schemes)

    p = sub.add_parser('serve', help='Run the HTTP API')
    p.add_argument('--host', type=str, default='127.0.0.1')
    p.add_argument('--port', type=int, default=8000)
    p.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = Config.from_env()
    if args.roots:
        config.roots_file = args.roots
    if args.schemes:
        config.schemes_file = args.schemes
    if args.no_defaults:
        config.load_defaults = False

    # Quiet by default so command output stays readable
    setup_logging(args.log_level or ('WARNING' if args.command != 'serve' else config.log_level))

    engine = build_engine(config)
    return args.func(engine, args)


if __name__ == '__main__':
    sys.exit(main())
