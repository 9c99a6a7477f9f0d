"""CORE language interpreter.

CORE is a small imperative teaching language: integers, declarations, assignment, conditionals, loops, and
read/write. Basic program flow:
    1. Lexer: classifies program text into lexemes on demand, see corelang/grammar/lexical.py
    2. Parser: builds a syntax tree by recursive descent, one lexeme of lookahead, consulting the symbol table so
       that every identifier is declared exactly once and before use
        - For program/statement grammar rules, see corelang/grammar/syntax.py
        - For expression/condition grammar rules, see corelang/grammar/expression.py
    3. Printer: regenerates canonical source text from the tree (display methods)
    4. Evaluator: walks the tree against the symbol table and the input data (execute/value/evaluate methods)

corelang/lang wraps the pipeline for use: errors and their console display, Session, the shell, and main.
"""

__version__ = "0.1.0"
