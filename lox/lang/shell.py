"""Handles interactive/command-line mode for the Lox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "Lox interpreter :: Python backend\nType 'help' for more information, 'exit' to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, show_ast=False, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.show_ast = show_ast  # print syntax trees instead of running lines

        self._tmp_line = ""

    def onecmd(self, line):
        """Lines continuing an unfinished statement are always Lox, even if they look like a shell command. So are
        assignments to variables that share a command's name, such as 'exit = 1;'.
        """
        if self._tmp_line:
            return self.default(line)

        command, arg, __ = self.parseline(line)
        if command and arg is not None and arg.startswith("="):
            return self.default(line)
        return super().onecmd(line)

    def default(self, line):
        """Executes arbitrary Lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            line, add_to_prev = self.sess.preprocess_line(line, self._tmp_line)

            if add_to_prev:
                self._tmp_line = line
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            try:
                if self.show_ast:
                    print(self.sess.dump(line))
                else:
                    self.sess.run(line)
            finally:
                self.sess.error_handler.reset()  # a syntax error shouldn't block the following lines

    def do_help(self, arg):
        """Prints a short intro rather than the command docs."""
        print("Welcome to the Lox interpreter!\n\n"
              "Lox is a small dynamically-typed language with numbers, strings, booleans and nil, \n"
              "variables, blocks and if/else. Statements end with ';'.\n\n"
              "Try it out by typing 'var greeting = \"hello\";'. This will bind the string to the \n"
              "name 'greeting'. Next, try typing 'print greeting + \" world\";'. Blocks ('{ ... }') \n"
              "may span several lines.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        return True
