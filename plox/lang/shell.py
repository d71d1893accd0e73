"""Handles interactive/command-line mode for the plox interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """plox interpreter shell."""
    intro = "plox :: Python backend\nType 'help' for more information, 'exit' or Ctrl-D to leave."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.outcomes = []

        self._tmp_line = ""

    @staticmethod
    def needs_continuation(source):
        """Whether or not source has unclosed braces or parentheses, in which case the shell waits for more input."""
        return source.count("{") > source.count("}") or source.count("(") > source.count(")")

    def default(self, line):
        """Executes arbitrary plox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line

            if Shell.needs_continuation(source):
                self._tmp_line = source + "\n"
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.outcomes.append(self.sess.run(source))

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the plox interpreter!\n\n"
              "Lox is a small dynamically typed scripting language with closures and classes. Every line you\n"
              "type is run as soon as it is complete; variables, functions and classes stay defined for the\n"
              "rest of the session.\n\n"
              "Try it out by typing 'var greeting = \"hello\";' and then 'print greeting + \", world\";'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit("")

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.warn("unrecognized argument '{}' to exit", arg, diagnosis=False)
            return False
        return True
