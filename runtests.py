#!/usr/bin/env python3

import unittest
import glob
import os
import sys

runner = unittest.TextTestRunner(verbosity=2)
suites = []

# Yay, import hacks! The test modules import their shared fixture by name.
sys.path.append(os.path.join(os.getcwd(), 'test'))
for testfile in sorted(glob.glob(os.path.join('test', 'test_*.py'))):
    # Strip the test/ and .py extension: test/test_whatever.py => test_whatever
    module = os.path.splitext(os.path.basename(testfile))[0]
    module = __import__(module)
    suites.append(unittest.defaultTestLoader.loadTestsFromModule(module))

testsuite = unittest.TestSuite(suites)
result = runner.run(testsuite)
sys.exit(not result.wasSuccessful())
