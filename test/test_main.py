"""
Program entry point tests (stdout and exit status).

Scope
- Replays the end-to-end scenarios of the command-line program: each run
  either prints "Parsed options: {...}" and returns 0, or prints a single
  diagnostic and exits with EXIT_STATUS.

Conventions
- Test method names follow CamelCase per project convention.
- Output is compared line by line with trailing whitespace ignored.
"""

from __future__ import annotations

import io
import shlex
import unittest
from contextlib import redirect_stdout
from unittest import TestCase

from clopts import EXIT_STATUS
from clopts.__main__ import main


def _block(nthreads=0, spp=0, seed=0, image_file="image.ppm", input_file="scene.txt",
           quiet="false", log_util="false", partial="false"):
    return [
        "Parsed options: {",
        f"    nthreads: {nthreads},",
        f"    spp: {spp},",
        f"    seed: {seed},",
        f"    image_file: {image_file},",
        f"    input_file: {input_file},",
        f"    quiet: {quiet},",
        f"    log_util: {log_util},",
        f"    partial: {partial}",
        "}",
    ]


class TestProgram(TestCase):

    def _run(self, prompt):
        stdout = io.StringIO()
        with redirect_stdout(stdout):
            try:
                status = main(shlex.split(prompt))
            except SystemExit as exit:
                status = exit.code
        return status, [line.rstrip() for line in stdout.getvalue().rstrip("\n").splitlines()]

    def assertParsed(self, prompt, **fields):
        status, lines = self._run(prompt)
        self.assertEqual(status, 0)
        self.assertEqual(lines, _block(**fields))

    def assertFault(self, prompt, title):
        status, lines = self._run(prompt)
        self.assertEqual(status, EXIT_STATUS)
        self.assertTrue(lines[0].endswith("| %s ]" % title), lines)
        self.assertEqual(sum(line.startswith("[ ") for line in lines), 1)

    def testNoArguments(self):
        self.assertParsed("")

    def testAllLongAttached(self):
        self.assertParsed(
            "--nthreads=4 --spp=100 --seed=1 --imagefile=imagefile.txt --input=inputfile.txt "
            "--quiet --logutil --partial",
            nthreads=4, spp=100, seed=1, image_file="imagefile.txt", input_file="inputfile.txt",
            quiet="true", log_util="true", partial="true",
        )

    def testAllLongSeparate(self):
        self.assertParsed(
            "--nthreads 4 --spp 100 --seed 1 --imagefile imagefile.txt --input inputfile.txt",
            nthreads=4, spp=100, seed=1, image_file="imagefile.txt", input_file="inputfile.txt",
        )

    def testAllShort(self):
        self.assertParsed("-n=4 -s=1 -q -l -p", nthreads=4, seed=1, quiet="true", log_util="true", partial="true")

    def testCluster(self):
        self.assertParsed("-qlp", quiet="true", log_util="true", partial="true")

    def testMix(self):
        self.assertParsed(
            "--nthreads 4 -s=1 -qp -l=false --input other_scene.txt",
            nthreads=4, seed=1, input_file="other_scene.txt", quiet="true", partial="true",
        )

    def testUnknownLongAttached(self):
        self.assertFault("--something=5", "unrecognized option")

    def testUnknownLongBare(self):
        self.assertFault("--something", "unrecognized option")

    def testUnknownShort(self):
        self.assertFault("-x", "unrecognized option")

    def testNotAnOption(self):
        self.assertFault("Hello!", "malformed token")

    def testClusterWithValue(self):
        self.assertFault("-pqs=5", "ambiguous cluster value")

    def testClusterWithNonBoolean(self):
        self.assertFault("-pqs", "invalid cluster member")

    def testMissingValue(self):
        self.assertFault("--nthreads", "missing value")

    def testBareBoolean(self):
        self.assertParsed("--quiet", quiet="true")

    def testIntegerNotNumeric(self):
        self.assertFault("-n=Hello", "type mismatch")

    def testIntegerOverflow(self):
        self.assertFault("-n=2147483648", "integer overflow")

    def testIntegerMaximum(self):
        self.assertParsed("-n=2147483647", nthreads=2147483647)

    def testMissingValueWithEquals(self):
        self.assertFault("--spp=", "missing value")


if __name__ == "__main__":
    unittest.main()
