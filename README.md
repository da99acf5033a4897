# slrgram

slrgram reads a context-free grammar from a plain text file and builds SLR(1)
ACTION and GOTO tables from it. It splits a source file into tokens using the
grammar's terminals, parses the tokens, and writes the concrete syntax tree
and an abstract syntax tree as JSON.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Grammar files

Each rule looks like this:

```
[*;0,2] "expr" -> "expr" '+' "term" | "term" `semantic action code`
```

- The AST rule in `[...]` comes first. A `*` before the `;` marks nodes built
  by this rule for flattening: their AST children are spliced into the parent
  in their place. After the `;` give a comma-separated list of child indices
  to keep, `-` to keep no children, or nothing to keep every child.
- The left-hand side is a non-terminal in double quotes, followed by `->`.
- The right-hand side lists alternatives separated by `|`. Terminals go in
  single quotes, non-terminals in double quotes. Special terminals go in angle
  brackets: `<n>` (newline), `<quot>`, `<squot>`, `<vertical>`, `<rarrow>`
  (`-`), `<langle>`, `<rangle>`, `<hash>`, `<semic>` and `<bquot>`. Other
  characters between symbols are ignored.
- Text between the first pair of backticks on the right-hand side is the
  rule's semantic action. It is stored with the rule and copied into the AST
  JSON under the key `"sematic"`. A semantic action may run over several
  lines.
- A line ending in `\` continues on the next line. Empty lines and lines
  starting with `#` are ignored.

`parse_grammar` logs and skips rules it cannot parse. `GrammarRule.parse` and
the other `parse` class methods raise `GrammarError`, as does
`parse_grammar_file` when the file cannot be read.

## Tokenizing

`Tokenizer(terminals, text)` drops lines that start with `//`, joins the
remaining lines, and skips spaces. At each position it tries the terminals
from longest to shortest; a terminal made only of letters (and longer than one
character) does not match when a letter, digit or `_` follows it. A single
quote `'` is always its own token and switches a character mode on or off; in
character mode only one-character terminals and terminals starting with `\`
are tried, and any other character becomes a token of its own. A character
that no terminal matches raises `TokenizeError`, which carries its
`position`. Iterating the tokenizer yields `Token` objects with `value` and
`terminal`.

## Parsing

`SLR1Parser(grammar).build_parse_table(start)` augments the grammar with
`S' -> start`, builds the LR(0) item sets, the FIRST and FOLLOW sets, and the
tables. Conflicts are logged, the first action found is kept, and each
conflict is recorded in `parser.conflicts` as
`(state, symbol, existing, new)`.

`parser.parse(symbols)` takes terminal `SLRSymbol`s and returns the root
`CSTNode`. A syntax error raises `ParseError` with `position`, `symbol`,
`state` and the `expected` symbols. `CSTNode.to_ast()` applies the AST rules;
both node types have `to_dict()` and `to_json()`.

`slrgram.report` offers `collect_symbols`, `format_parse_table` (a text
table followed by the numbered productions), `parser_to_dict` and
`parser_to_json` (productions, item sets, ACTION and GOTO tables).

## Command line

```
slrgram [--grammar grammar.txt] [--input test.sgo] [--start program]
        [--output-dir .] [--print-table]
```

The command prints the grammar and the tokens, checks that every non-terminal
used is defined, builds the parser and, with `--print-table`, prints the parse
table. It writes `slr_parser.json`, `parser_tree_cst.json` and
`parser_tree_ast.json` to the output directory. It exits with status 1 when
the grammar or input file cannot be read, the input holds an unexpected
character, or a non-terminal is undefined. When the input does not parse, it
reports the error and writes trees holding a single empty node, exiting
with 0.

## Library use

```python
from slrgram.grammar import Grammar, parse_grammar
from slrgram.tokenizer import Tokenizer
from slrgram.model import SLRSymbol, SymbolType
from slrgram.parser import SLR1Parser
from slrgram.report import parser_to_json

rules = parse_grammar(
    '[;] "expr" -> "expr" \'+\' "term" | "term"\n'
    "[;] \"term\" -> 'a'\n"
)
grammar = Grammar(rules)

tokens = list(Tokenizer(grammar.extract_terminals(), "a + a"))
symbols = [SLRSymbol(tok.terminal.value, SymbolType.TERMINAL) for tok in tokens]

parser = SLR1Parser(grammar)
parser.build_parse_table("expr")
cst = parser.parse(symbols)
print(cst)
print(cst.to_ast().to_json())
print(parser_to_json(parser))
```

## What it does not do

Semantic actions are only carried along as text; slrgram never runs them and
does not generate or execute code from the syntax tree. Tokens are only the
grammar's literal terminals; there is no separate lexer for identifiers or
numbers beyond what the grammar spells out.