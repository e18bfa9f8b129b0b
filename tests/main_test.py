import contextlib
import io
import os
import tempfile
import unittest

from lox.main import main


class MainTestCase(unittest.TestCase):

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = self._tmp.name

    def tearDown(self):
        self._tmp.cleanup()

    def run_script(self, source, *flags):
        path = os.path.join(self.tmp, "script.lox")
        with open(path, "w", encoding="utf-8") as file:
            file.write(source)

        out, err = io.StringIO(), io.StringIO()
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            code = main([path, *flags])
        return code, out.getvalue(), err.getvalue()

    def test_exit_codes(self):
        cases = {
            0: "print 1;",
            65: "print ;",
            70: "print nil + 1;",
        }
        for expected, source in cases.items():
            code, __, __ = self.run_script(source)
            self.assertEqual(expected, code, source)

    def test_output(self):
        code, out, err = self.run_script('print "a" + "b";\nprint 2 * 2;')
        self.assertEqual((0, "ab\n4\n", ""), (code, out, err))

    def test_diagnostics_go_to_stderr(self):
        code, out, err = self.run_script("print 1;\nprint 1 / 0;")
        self.assertEqual("1\n", out)
        self.assertIn("[line 2]", err)
        self.assertIn("Division by zero.", err)

    def test_ast_flag(self):
        code, out, __ = self.run_script("print 1 + 2;", "--ast")
        self.assertEqual("(print (+ 1 2))\n3\n", out)

    def test_missing_file(self):
        err = io.StringIO()
        with contextlib.redirect_stderr(err):
            code = main([os.path.join(self.tmp, "missing.lox")])
        self.assertEqual(66, code)

    def test_usage(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as context:
                main(["one.lox", "two.lox"])
        self.assertEqual(64, context.exception.code)


if __name__ == '__main__':
    unittest.main()
