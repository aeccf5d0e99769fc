"""
Command-line front end for the arithmetic parser.

Evaluates the expression given as arguments, or prompts for one line on
stdin when no arguments are given.

Environment variables:
    ARITHPARSE_LOG_LEVEL - Log level (debug, info, warning, error)
    ARITHPARSE_MAX_EXPRESSION_LENGTH - Maximum accepted input length
    ARITHPARSE_MAX_NESTING_DEPTH - Maximum parenthesis nesting depth

Usage:
    arithparse "2 * (3 + 4)"
    python -m arithparse.cli
"""

import logging
import os
import sys
from typing import List, Optional

from .expression import Expression
from .limits import limits_from_env

ENV_VAR_LOG_LEVEL = "ARITHPARSE_LOG_LEVEL"

PROMPT = "Please provide an arithmetic expression: "


def _log_level(name: str) -> int:
    """Maps a level name to a logging level, falling back to WARNING."""
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.WARNING


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point. Returns the process exit status."""
    logging.basicConfig(level=_log_level(os.getenv(ENV_VAR_LOG_LEVEL, "warning")))

    args = sys.argv[1:] if argv is None else argv
    if args:
        user_input = " ".join(args)
    else:
        print("Simple Arithmetic Parser")
        try:
            user_input = input(PROMPT)
        except EOFError:
            user_input = ""

    expression = Expression(user_input, limits_from_env())

    if expression.is_valid:
        print(f"The expression evaluated to: {expression.value:g}")
        return 0

    print("Unable to resolve given expression")
    print(f"Error Message: {expression.error_message}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
