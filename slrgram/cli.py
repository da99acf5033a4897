"""Command line: tokenize a source file and parse it with an SLR(1) grammar."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from slrgram.grammar import Grammar, GrammarError, parse_grammar_file, print_grammar
from slrgram.model import CSTNode, SLRSymbol, SymbolType
from slrgram.parser import ParseError, SLR1Parser
from slrgram.report import format_parse_table, parser_to_json
from slrgram.tokenizer import TokenizeError, Tokenizer

_RULE = "-" * 40


def _arguments(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="slrgram",
        description="Build an SLR(1) parser from a grammar and parse an input file.",
    )
    parser.add_argument("--grammar", default="grammar.txt", help="grammar file")
    parser.add_argument("--input", default="test.sgo", help="source file to parse")
    parser.add_argument("--start", default="program", help="start symbol")
    parser.add_argument(
        "--output-dir", default=".", help="directory for the JSON output files"
    )
    parser.add_argument(
        "--print-table", action="store_true", help="print the parse table"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Run the whole pipeline; return the process exit status."""
    args = _arguments(argv)
    out_dir = Path(args.output_dir)

    try:
        rules = parse_grammar_file(args.grammar)
    except GrammarError:
        print(f"Failed to parse grammar file: {args.grammar}", file=sys.stderr)
        return 1
    print_grammar(rules)

    grammar = Grammar(rules)
    terminals = grammar.extract_terminals()

    try:
        source = Path(args.input).read_text(encoding="utf-8")
    except OSError:
        print(f"Failed to open input file: {args.input}", file=sys.stderr)
        return 1

    print(f"Tokens from file: {args.input}")
    print(_RULE)
    tokens = []
    try:
        for count, token in enumerate(Tokenizer(terminals, source)):
            print(f"[{count}]{token}")
            tokens.append(token)
    except TokenizeError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    print(_RULE)
    print(f"Total tokens: {len(tokens)}")

    print("\nInitializing SLR1 Parser...")
    undefined = grammar.find_undefined_non_terminals()
    if undefined:
        names = " ".join(str(nt) for nt in undefined)
        print(f"Undefined non-terminals in grammar: {names}", file=sys.stderr)
        return 1

    parser = SLR1Parser(grammar)
    print(f"Using start symbol: {args.start}")
    parser.build_parse_table(args.start)
    if args.print_table:
        print(format_parse_table(parser), end="")

    out_dir.mkdir(parents=True, exist_ok=True)
    (out_dir / "slr_parser.json").write_text(parser_to_json(parser), encoding="utf-8")
    print("SLR parser data saved to slr_parser.json")

    symbols = [
        SLRSymbol(token.terminal.value, SymbolType.TERMINAL) for token in tokens
    ]
    print("\nParsing input...")
    try:
        root = parser.parse(symbols)
        print("Parse succeeded!")
    except ParseError as exc:
        print(f"{exc}", file=sys.stderr)
        print("Parse failed! Check the input and the grammar rules.", file=sys.stderr)
        root = CSTNode(SLRSymbol("", SymbolType.NON_TERMINAL))
    print(_RULE)

    (out_dir / "parser_tree_cst.json").write_text(root.to_json(), encoding="utf-8")
    print("Parser tree saved to parser_tree_cst.json")
    (out_dir / "parser_tree_ast.json").write_text(
        root.to_ast().to_json(), encoding="utf-8"
    )
    print("Parser tree saved to parser_tree_ast.json")
    return 0


if __name__ == "__main__":
    sys.exit(main())