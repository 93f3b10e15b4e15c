"""Uses the Lox implementation to interpret .lox files or run in command-line mode. Also uses the error handling context
manager. Called from the lox executable script.

Exit codes (file mode): 65 if the file has a syntax error, 75 if a runtime error occurred, 1 if the file could not
be read or the interpreter failed internally.
"""

import argparse
import sys

from lox.grammar.parser import Parser
from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell

EX_DATAERR = 65
EX_RUNTIME = 75


def main(argv=None):
    """Runs the Lox interpreter. Called from the lox executable script."""
    assert sys.version_info >= (3, 8), "lox cannot be run with python < 3.8"

    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lox", description="Tree-walking interpreter for the Lox language.")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--ast", action="store_true", help="print syntax trees instead of running them")
        parser.add_argument("--max-depth", type=int, default=Parser.MAX_DEPTH,
                            help=f"maximum nesting of expressions and blocks (default: {Parser.MAX_DEPTH})")
        args = parser.parse_args(argv)

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, max_depth=args.max_depth)

            if args.ast:
                print(sess.dump())
            else:
                sess.run()

            if error_handler.had_error:
                sys.exit(EX_DATAERR)
            if error_handler.had_runtime_error:
                sys.exit(EX_RUNTIME)

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, max_depth=args.max_depth)
            Shell(sess, show_ast=args.ast).cmdloop()


if __name__ == "__main__":
    main()
