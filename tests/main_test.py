import contextlib
import io
import os
import tempfile
import unittest

from lox.main import EX_DATAERR, EX_RUNTIME, main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self.paths = []

    def tearDown(self):
        for path in self.paths:
            os.remove(path)

    def write(self, source):
        handle, path = tempfile.mkstemp(suffix=".lox")
        with os.fdopen(handle, "w") as file:
            file.write(source)
        self.paths.append(path)
        return path

    def run_main(self, *argv):
        stdout, stderr = io.StringIO(), io.StringIO()
        code = None
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(stderr):
            try:
                main(list(argv))
            except SystemExit as exit_:
                code = exit_.code
        return code, stdout.getvalue(), stderr.getvalue()

    def test_runs_file(self):
        code, stdout, __ = self.run_main(self.write("var a = 1;\nif (a > 0) print \"positive\"; else print a;\n"))
        self.assertIsNone(code)
        self.assertEqual("positive\n", stdout)

    def test_syntax_error_exit_code(self):
        code, stdout, stderr = self.run_main(self.write("print 1;\nprint 2\n"))
        self.assertEqual(EX_DATAERR, code)
        self.assertEqual("", stdout, "nothing runs after a syntax error")
        self.assertIn("Expect ';' after value.", stderr)

    def test_runtime_error_exit_code(self):
        code, stdout, stderr = self.run_main(self.write("print 1;\nprint -\"a\";\nprint 2;\n"))
        self.assertEqual(EX_RUNTIME, code)
        self.assertEqual("1\n", stdout)
        self.assertIn("Operand must be a number.", stderr)
        self.assertIn("[line 2]", stderr)

    def test_missing_file(self):
        code, __, stderr = self.run_main(os.path.join(tempfile.gettempdir(), "does-not-exist.lox"))
        self.assertEqual(1, code)
        self.assertIn("could not be opened", stderr)

    def test_ast(self):
        code, stdout, __ = self.run_main("--ast", self.write("var a = 1 + 2;\nprint a;\n"))
        self.assertIsNone(code)
        self.assertEqual("(var a = (+ 1 2))\n(print a)\n", stdout)

    def test_max_depth(self):
        path = self.write("print ((1));\n")
        self.assertEqual(EX_DATAERR, self.run_main("--max-depth", "1", path)[0])
        self.assertIsNone(self.run_main("--max-depth", "2", path)[0])


if __name__ == '__main__':
    unittest.main()
