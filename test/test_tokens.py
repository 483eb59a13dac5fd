"""
Token shape and cursor behavioral tests.

Scope
- Validate classify() for every grammar shape and both shape faults.
- Validate Cursor moves: peek, advance by one/two, and the single regression.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from clopts import Cluster, Cursor, Named, classify
from clopts.faults import MalformedTokenError, AmbiguousClusterValueError, FaultCode


class TestClassify(TestCase):

    def testLongAttached(self):
        self.assertEqual(classify("--nthreads=4"), Named("--nthreads=4", "nthreads", "4", True))

    def testLongDeferred(self):
        self.assertEqual(classify("--nthreads"), Named("--nthreads", "nthreads", "", False))

    def testLongEmptyAttached(self):
        self.assertEqual(classify("--spp="), Named("--spp=", "spp", "", True))

    def testValueKeepsLaterEquals(self):
        self.assertEqual(classify("--input=a=b").value, "a=b")

    def testShortAttached(self):
        self.assertEqual(classify("-n=4"), Named("-n=4", "n", "4", True))

    def testShortDeferred(self):
        self.assertEqual(classify("-n"), Named("-n", "n", "", False))

    def testCluster(self):
        self.assertEqual(classify("-qlp"), Cluster("-qlp", "qlp"))

    def testClusterWithValueIsAmbiguous(self):
        with self.assertRaises(AmbiguousClusterValueError) as caught:
            classify("-pqs=5", index=3)
        self.assertEqual(caught.exception.options["input"], "pqs")
        self.assertEqual(caught.exception.options["index"], 3)
        self.assertEqual(caught.exception.code, FaultCode.AMBIGUOUS_CLUSTER_VALUE)
        self.assertIn("third position", caught.exception.message)

    def testLongNameBehindSingleDashIsCluster(self):
        self.assertIsInstance(classify("-nthreads"), Cluster)

    def testLongNameBehindSingleDashWithValueIsAmbiguous(self):
        with self.assertRaises(AmbiguousClusterValueError):
            classify("-nthreads=4")

    def testNoDashIsMalformed(self):
        with self.assertRaises(MalformedTokenError) as caught:
            classify("Hello!")
        self.assertEqual(caught.exception.options["token"], "Hello!")

    def testEmptyTokenIsMalformed(self):
        with self.assertRaises(MalformedTokenError):
            classify("")

    def testThreeDashesAreNamed(self):
        self.assertEqual(classify("---seed=2"), Named("---seed=2", "seed", "2", True))

    def testSingleDashWithLeadingEquals(self):
        self.assertEqual(classify("-=x"), Named("-=x", "", "x", True))

    def testBareDash(self):
        self.assertEqual(classify("-"), Named("-", "", "", False))


class TestCursor(TestCase):

    def testWalk(self):
        cursor = Cursor(["-a", "-b", "-c"])
        self.assertTrue(cursor)
        self.assertEqual(cursor.current, "-a")
        self.assertEqual(cursor.position, 1)
        self.assertEqual(cursor.peek(), "-b")
        cursor.advance(2)
        self.assertEqual(cursor.current, "-c")
        self.assertEqual(cursor.peek(), "")
        cursor.advance()
        self.assertFalse(cursor)
        self.assertEqual(len(cursor), 0)

    def testRegressCancelsLookahead(self):
        cursor = Cursor(["--quiet", "--nthreads", "4"])
        cursor.advance(2)
        cursor.regress()
        self.assertEqual(cursor.current, "--nthreads")
        self.assertEqual(cursor.index, 1)

    def testRegressAfterSingleStepRejected(self):
        cursor = Cursor(["-q", "-l"])
        cursor.advance(1)
        with self.assertRaises(RuntimeError):
            cursor.regress()

    def testRegressTwiceRejected(self):
        cursor = Cursor(["--quiet", "--nthreads", "4"])
        cursor.advance(2)
        cursor.regress()
        with self.assertRaises(RuntimeError):
            cursor.regress()

    def testRegressBeforeAnyStepRejected(self):
        with self.assertRaises(RuntimeError):
            Cursor(["-q"]).regress()

    def testAdvanceOnlyByOneOrTwo(self):
        with self.assertRaises(ValueError):
            Cursor(["-a", "-b", "-c"]).advance(3)

    def testAdvancePastEndRejected(self):
        with self.assertRaises(ValueError):
            Cursor(["-a"]).advance(2)

    def testTokensAreSnapshotted(self):
        tokens = ["-a"]
        cursor = Cursor(tokens)
        tokens.append("-b")
        self.assertEqual(len(cursor), 1)


if __name__ == "__main__":
    unittest.main()
