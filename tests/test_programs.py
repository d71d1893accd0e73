"""Runs every Lox program in tests/programs and checks it against the expectations written in its comments:
    // expect: <output line>
    // expect runtime error: <message>
    // error: <static error message>
"""

import os
import re
import unittest

from plox.lang.session import Outcome

from tests.util import run

PROGRAMS_DIR = os.path.join(os.path.dirname(__file__), "programs")

EXPECT_OUTPUT = re.compile(r"// expect: ?(.*)")
EXPECT_RUNTIME_ERROR = re.compile(r"// expect runtime error: (.+)")
EXPECT_ERROR = re.compile(r"// error: (.+)")


def discover_programs():
    return sorted(os.path.join(PROGRAMS_DIR, name) for name in os.listdir(PROGRAMS_DIR) if name.endswith(".lox"))


def parse_expectations(source):
    """Returns (output, runtime error message or None, static error (line, message) pairs)."""
    output = []
    runtime_error = None
    errors = []

    for line_num, line in enumerate(source.splitlines(), start=1):
        match = EXPECT_OUTPUT.search(line)
        if match:
            output.append(match.group(1) + "\n")

        match = EXPECT_RUNTIME_ERROR.search(line)
        if match:
            runtime_error = match.group(1)

        match = EXPECT_ERROR.search(line)
        if match:
            errors.append((line_num, match.group(1)))

    return "".join(output), runtime_error, errors


class ProgramsTestCase(unittest.TestCase):

    def test_programs(self):
        programs = discover_programs()
        self.assertTrue(programs)

        for path in programs:
            with self.subTest(program=os.path.basename(path)):
                with open(path, "r") as file:
                    source = file.read()

                output, runtime_error, errors = parse_expectations(source)
                outcome, actual, handler = run(source, path)

                if errors:
                    self.assertEqual(Outcome.STATIC_ERROR, outcome)
                    self.assertEqual(errors, [(error.line, error.message) for error in handler.reported])
                    self.assertEqual("", actual)
                    continue

                self.assertEqual(output, actual)
                if runtime_error is not None:
                    self.assertEqual(Outcome.RUNTIME_ERROR, outcome)
                    self.assertEqual([runtime_error], handler.messages)
                else:
                    self.assertEqual(Outcome.OK, outcome)
                    self.assertEqual([], handler.messages)


if __name__ == '__main__':
    unittest.main()
