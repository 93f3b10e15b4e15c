"""Session control for Lox. Runs source text through the Scanner, Parser and Interpreter, either for a whole file or
one interactive line at a time. Variables defined by one run stay visible to the next run in the same session.
"""

from lox.grammar.parser import Parser
from lox.grammar.printer import AstPrinter
from lox.grammar.scanner import Scanner
from lox.interpreter import Interpreter
from lox.lang.error import LoxError


class Session:
    """Governs a Lox session, with a single Interpreter (and so a single global scope) shared by every run."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line, max_depth=Parser.MAX_DEPTH, output=print):
        self.error_handler = error_handler
        self.error_handler.register_file(path)

        self.path = path            # used for error messages
        self.cmd_line = cmd_line    # whether or not in command-line mode
        self.max_depth = max_depth  # parser nesting limit

        self.interpreter = Interpreter(error_handler, output)
        self.source = ""

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    self.source = file.read()
            except OSError:
                raise LoxError(f"'{path}' could not be opened")

        elif not cmd_line:
            raise LoxError("'<in>' is a reserved filename")

    @staticmethod
    def preprocess_line(line, add_to_prev=""):
        """Prepends add_to_prev (the unfinished previous lines) to line. Returns the updated line and whether it is
        still unfinished, i.e. has an unclosed brace or string, and so needs a line continuation.
        """
        if add_to_prev:
            line = add_to_prev + "\n" + line

        depth, in_string, pos = 0, False, 0
        while pos < len(line):
            char = line[pos]
            if in_string:
                in_string = char != "\""
            elif char == "\"":
                in_string = True
            elif line.startswith("//", pos):
                newline = line.find("\n", pos)
                pos = len(line) if newline == -1 else newline
                continue
            elif char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
            pos += 1

        return line, in_string or depth > 0

    def parse(self, source=None):
        """Scans and parses source (this session's file if None). Returns the Program; syntax errors are reported to
        the error handler.
        """
        if source is None:
            source = self.source
        self.error_handler.register_source(self.path, source)

        tokens = Scanner(source, self.error_handler).scan_tokens()
        return Parser(tokens, self.error_handler, self.max_depth).parse()

    def run(self, source=None):
        """Parses and, if no syntax error was reported, interprets source. Returns whether the run completed without
        reporting an error.
        """
        reported = len(self.error_handler.errors)

        program = self.parse(source)
        if self.error_handler.had_error:
            return False

        self.interpreter.interpret(program)
        return len(self.error_handler.errors) == reported

    def dump(self, source=None):
        """Returns the parenthesized form of source's syntax tree instead of running it."""
        return AstPrinter().print_program(self.parse(source))
