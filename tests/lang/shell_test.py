import contextlib
import io
import unittest

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def make_shell(show_ast=False):
    output = []
    sess = Session(ErrorHandler(stream=io.StringIO()), Session.SH_FILE, cmd_line=True, output=output.append)
    return Shell(sess, stdout=io.StringIO(), show_ast=show_ast), output


class ShellTestCase(unittest.TestCase):

    def test_lines_share_variables(self):
        shell, output = make_shell()
        shell.onecmd("var a = 1;")
        shell.onecmd("print a + 1;")
        self.assertEqual(["2"], output)

    def test_line_continuation(self):
        shell, output = make_shell()
        shell.onecmd("{")
        self.assertEqual(Shell.secondary_prompt, shell.prompt)

        shell.onecmd("var inner = \"x\";")
        shell.onecmd("print inner;")
        self.assertEqual([], output, "nothing runs until the block is closed")

        shell.onecmd("}")
        self.assertEqual(Shell.prompt, shell.prompt)
        self.assertEqual(["x"], output)

    def test_continued_line_is_never_a_command(self):
        shell, output = make_shell()
        shell.onecmd("var exit = 1; {")
        self.assertFalse(shell.onecmd("exit = 2;"))
        shell.onecmd("}")
        shell.onecmd("print exit;")
        self.assertEqual(["2"], output)

    def test_assignment_to_command_name_is_lox(self):
        shell, output = make_shell()
        shell.onecmd("var exit = 0; var help = 0;")
        self.assertFalse(shell.onecmd("exit = 1;"))
        self.assertFalse(shell.onecmd("help=2;"))
        shell.onecmd("print exit + help;")
        self.assertEqual(["3"], output)

    def test_syntax_error_does_not_block_next_line(self):
        shell, output = make_shell()
        shell.onecmd("print ;")
        self.assertFalse(shell.sess.error_handler.had_error)
        shell.onecmd("print 1;")
        self.assertEqual(["1"], output)

    def test_runtime_error_keeps_shell_alive(self):
        shell, output = make_shell()
        shell.onecmd("print undefined;")
        shell.onecmd('print "still here";')
        self.assertEqual(["still here"], output)
        self.assertTrue(shell.sess.error_handler.had_runtime_error)

    def test_show_ast(self):
        shell, output = make_shell(show_ast=True)
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            shell.onecmd("print 1 + 2;")
        self.assertEqual("(print (+ 1 2))\n", stdout.getvalue())
        self.assertEqual([], output)

    def test_exit(self):
        shell, __ = make_shell()
        self.assertTrue(shell.onecmd("exit"))
        with contextlib.redirect_stdout(io.StringIO()):
            self.assertTrue(shell.onecmd("EOF"))

    def test_emptyline(self):
        shell, output = make_shell()
        shell.onecmd("print 1;")
        shell.onecmd("")
        self.assertEqual(["1"], output, "empty line should not repeat the previous one")


if __name__ == '__main__':
    unittest.main()
