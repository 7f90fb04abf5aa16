"""Command-line interface for ldlmap-core."""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Any

import orjson
from loguru import logger

from completion.context import CompletionContextKind
from completion.engine import CompletionEngine
from completion.ranking import UsageLearner
from parse.symbols import parse_document
from resolve.definition import resolve_definition
from resolve.outline import build_outline
from resolve.references import find_references
from resolve.workspace_symbols import search_workspace_symbols
from rules.checks import run_checks
from rules.config import ConfigError, LdlMapConfig, load_config
from workspace.index import WorkspaceIndex
from workspace.source import FileSystemSource

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _add_root(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        default=".",
        help="Workspace root (default: .)",
    )


def _add_cursor(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("file", help="Document to query")
    parser.add_argument("--line", type=int, required=True, help="1-based line")
    parser.add_argument("--col", type=int, required=True, help="1-based column")
    _add_root(parser)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ldlmap")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for messages on stderr (default: WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    symbols_parser = subparsers.add_parser("symbols", help="Search workspace symbols")
    symbols_parser.add_argument(
        "query",
        nargs="?",
        default="",
        help="Name/label/doc substring, label:<name> or type:<kind>",
    )
    _add_root(symbols_parser)

    definition_parser = subparsers.add_parser(
        "definition", help="Resolve the identifier at a cursor position"
    )
    _add_cursor(definition_parser)

    references_parser = subparsers.add_parser(
        "references", help="Find references to a symbol name"
    )
    references_parser.add_argument("name", help="Symbol name")
    references_parser.add_argument(
        "--include-declarations",
        action="store_true",
        help="Also report declaration positions",
    )
    _add_root(references_parser)

    complete_parser = subparsers.add_parser(
        "complete", help="List completion candidates at a cursor position"
    )
    _add_cursor(complete_parser)
    complete_parser.add_argument(
        "--usage",
        default=None,
        help="Usage history file used to personalize ranking",
    )

    accept_parser = subparsers.add_parser(
        "accept", help="Record an accepted completion in a usage history file"
    )
    accept_parser.add_argument("label", help="Accepted candidate label")
    accept_parser.add_argument(
        "--usage", required=True, help="Usage history file to update"
    )
    accept_parser.add_argument(
        "--context",
        default=None,
        choices=[kind.value for kind in CompletionContextKind],
        help="Completion context the candidate was accepted in",
    )
    _add_root(accept_parser)

    outline_parser = subparsers.add_parser("outline", help="Label-grouped outline")
    outline_parser.add_argument("file", help="Document to outline")

    check_parser = subparsers.add_parser("check", help="Run advisory checks")
    check_parser.add_argument(
        "files",
        nargs="*",
        help="Documents to check (default: every workspace document)",
    )
    _add_root(check_parser)

    return parser


def _configure_logging(level: str) -> None:
    logger.remove()
    # Look up sys.stderr per message; it may be swapped after configuration.
    logger.add(lambda message: sys.stderr.write(message), level=level)


def _emit(payload: Any) -> None:
    data = orjson.dumps(payload, option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2)
    sys.stdout.write(data.decode("utf-8") + "\n")


def _identity(root: Path, path: Path) -> str:
    try:
        return path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()


def _resolve_file(root: Path, file: str) -> Path:
    path = Path(file).expanduser()
    if not path.is_absolute():
        path = root / path
    return path.resolve()


def _build_index(root: Path, config: LdlMapConfig) -> WorkspaceIndex:
    return WorkspaceIndex(FileSystemSource(root, config))


async def _handle_symbols(root: Path, config: LdlMapConfig, query: str) -> int:
    hits = await search_workspace_symbols(_build_index(root, config), query)
    _emit([hit.model_dump() for hit in hits])
    return 0


async def _handle_definition(
    root: Path, config: LdlMapConfig, file: Path, line: int, col: int
) -> int:
    text = file.read_text(encoding="utf-8")
    result = await resolve_definition(
        _build_index(root, config), _identity(root, file), text, line, col
    )
    _emit(result.model_dump())
    return 1 if result.status == "not_found" else 0


async def _handle_references(
    root: Path, config: LdlMapConfig, name: str, include_declarations: bool
) -> int:
    refs = await find_references(
        _build_index(root, config), name, include_declarations=include_declarations
    )
    _emit([ref.model_dump() for ref in refs])
    return 0 if refs else 1


async def _handle_complete(
    root: Path,
    config: LdlMapConfig,
    file: Path,
    line: int,
    col: int,
    usage: str | None,
) -> int:
    text = file.read_text(encoding="utf-8")
    learner = None
    if usage is not None:
        learner = UsageLearner.load(
            Path(usage).expanduser(), history_size=config.completion.history_size
        )
    engine = CompletionEngine(
        _build_index(root, config), config.completion, learner=learner
    )
    candidates = await engine.complete(_identity(root, file), text, line, col)
    _emit([candidate.model_dump() for candidate in candidates])
    return 0


def _handle_accept(
    config: LdlMapConfig, label: str, usage: str, context: str | None
) -> int:
    path = Path(usage).expanduser()
    learner = UsageLearner.load(path, history_size=config.completion.history_size)
    stats = learner.record(label, context)
    learner.dump(path)
    _emit(stats.model_dump())
    return 0


def _handle_outline(file: Path) -> int:
    table = parse_document(file.read_text(encoding="utf-8"))
    _emit([group.model_dump() for group in build_outline(table)])
    return 0


async def _handle_check(root: Path, config: LdlMapConfig, files: list[Path]) -> int:
    report: dict[str, list[dict[str, Any]]] = {}
    if files:
        for path in files:
            findings = run_checks(path.read_text(encoding="utf-8"), config.checks)
            report[_identity(root, path)] = [f.model_dump() for f in findings]
    else:
        index = _build_index(root, config)
        async for identity, text in index.iter_documents():
            findings = run_checks(text, config.checks)
            report[identity] = [f.model_dump() for f in findings]

    _emit(report)
    return 1 if any(report.values()) else 0


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)

    if args.command == "outline":
        try:
            return _handle_outline(Path(args.file).expanduser().resolve())
        except OSError as exc:
            sys.stderr.write(f"error: {exc}\n")
            return 2

    root = Path(args.root).expanduser().resolve()
    try:
        config = load_config(root)
    except ConfigError as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    try:
        if args.command == "symbols":
            return asyncio.run(_handle_symbols(root, config, args.query))

        if args.command == "definition":
            file = _resolve_file(root, args.file)
            return asyncio.run(
                _handle_definition(root, config, file, args.line, args.col)
            )

        if args.command == "references":
            return asyncio.run(
                _handle_references(root, config, args.name, args.include_declarations)
            )

        if args.command == "complete":
            file = _resolve_file(root, args.file)
            return asyncio.run(
                _handle_complete(root, config, file, args.line, args.col, args.usage)
            )

        if args.command == "accept":
            return _handle_accept(config, args.label, args.usage, args.context)

        if args.command == "check":
            files = [_resolve_file(root, f) for f in args.files]
            return asyncio.run(_handle_check(root, config, files))
    except (OSError, UnicodeDecodeError) as exc:
        sys.stderr.write(f"error: {exc}\n")
        return 2

    raise AssertionError


if __name__ == "__main__":
    raise SystemExit(main())
