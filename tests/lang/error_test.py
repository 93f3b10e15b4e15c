import io
import unittest

from lox.grammar.tokens import Token, TokenType
from lox.lang.error import ErrorHandler, LoxError, LoxRuntimeError, ParseError, StaticError


def handler(fatal=False):
    return ErrorHandler(fatal=fatal, stream=io.StringIO())


class ReportTestCase(unittest.TestCase):

    def test_error(self):
        error_handler = handler()
        error_handler.error(3, "Unexpected character: @")

        self.assertTrue(error_handler.had_error)
        self.assertFalse(error_handler.had_runtime_error)
        self.assertEqual(1, len(error_handler.errors))
        self.assertIsInstance(error_handler.errors[0], StaticError)
        self.assertEqual(3, error_handler.errors[0].line)

        written = error_handler.stream.getvalue()
        self.assertIn("[line 3]", written)
        self.assertIn(": Unexpected character: @", written)

    def test_token_error(self):
        cases = {
            Token(TokenType.SEMICOLON, ";", None, 2): " at ';'",
            Token(TokenType.IDENTIFIER, "name", None, 2): " at 'name'",
            Token(TokenType.EOF, "", None, 2): " at end",
        }
        for token, where in cases.items():
            error_handler = handler()
            error = error_handler.token_error(token, "Expect expression.")

            self.assertIsInstance(error, ParseError)
            self.assertEqual(where, error.where, where)
            self.assertEqual([error], error_handler.errors, where)
            self.assertIn(f"{where}: Expect expression.", error_handler.stream.getvalue(), where)

    def test_runtime_error(self):
        error_handler = handler()
        error_handler.runtime_error(LoxRuntimeError(Token(TokenType.MINUS, "-", None, 4), "Operand must be a number."))

        self.assertTrue(error_handler.had_runtime_error)
        self.assertFalse(error_handler.had_error)
        written = error_handler.stream.getvalue()
        self.assertIn("Operand must be a number.", written)
        self.assertIn("[line 4]", written)

    def test_source_context(self):
        error_handler = handler()
        error_handler.register_source("script.lox", "var a = 1;\n  print @;\n")
        error_handler.error(2, "Unexpected character: @")

        written = error_handler.stream.getvalue()
        self.assertIn("File 'script.lox', line 2:", written)
        self.assertIn("    print @;", written)

    def test_reset(self):
        error_handler = handler()
        error_handler.error(1, "oops")
        error_handler.runtime_error(LoxRuntimeError(None, "boom"))
        error_handler.reset()

        self.assertFalse(error_handler.had_error)
        self.assertTrue(error_handler.had_runtime_error, "runtime errors outlive a reset")
        self.assertEqual([], error_handler.errors)


class ContextManagerTestCase(unittest.TestCase):

    def test_lox_errors_are_reported(self):
        error_handler = handler()
        with error_handler:
            raise LoxRuntimeError(None, "boom")
        with error_handler:
            raise StaticError("bad", line=1)
        with error_handler:
            raise LoxError("'missing.lox' could not be opened")

        self.assertTrue(error_handler.had_runtime_error)
        self.assertTrue(error_handler.had_error)
        self.assertEqual(["boom", "bad", "'missing.lox' could not be opened"],
                         [error.msg for error in error_handler.errors])

    def test_unknown_errors_are_internal(self):
        error_handler = handler()
        with self.assertRaises(ValueError):
            with error_handler:
                raise ValueError("unexpected")

        self.assertTrue(error_handler.errors[0].internal)
        self.assertIn("[internal]", error_handler.stream.getvalue())

    def test_recursion_error(self):
        error_handler = handler()
        with error_handler:
            raise RecursionError()
        self.assertEqual("maximum recursion depth exceeded", error_handler.errors[0].msg)

    def test_fatal_exits(self):
        error_handler = handler(fatal=True)
        with self.assertRaises(SystemExit) as context:
            with error_handler:
                raise LoxError("fatal")
        self.assertEqual(1, context.exception.code)

    def test_system_exit_passes_through(self):
        with self.assertRaises(SystemExit):
            with handler():
                raise SystemExit(65)


if __name__ == '__main__':
    unittest.main()
