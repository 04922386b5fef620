#!/usr/bin/env python3

"""
Test runner for the transcriptome builder.

Discovers and runs the unit and integration tests under
transcriptome_builder/tests, optionally filtered by file pattern or
restricted to named test classes.
"""

import unittest
import sys
import os
import argparse
import time
from typing import List, Optional

# Add current directory to path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

TEST_DIR = "transcriptome_builder/tests"


def discover_tests(test_dir: str = TEST_DIR,
                   pattern: str = "test_*.py") -> unittest.TestSuite:
    """Discover all test modules."""
    loader = unittest.TestLoader()
    test_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), test_dir)

    if os.path.exists(test_path):
        return loader.discover(test_path, pattern=pattern,
                               top_level_dir=os.path.dirname(os.path.abspath(__file__)))

    print(f"Warning: Test directory {test_path} not found")
    return unittest.TestSuite()


def report(result: unittest.TestResult, elapsed: float) -> bool:
    print("-" * 70)
    print(f"Tests completed in {elapsed:.2f} seconds")
    print(f"Tests run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")
    print(f"Skipped: {len(result.skipped)}")

    success = result.wasSuccessful()
    if success:
        print("\n✅ All tests passed!")
    else:
        print(f"\n❌ {len(result.failures) + len(result.errors)} test(s) failed")
    return success


def run_tests(verbosity: int = 2,
              test_pattern: Optional[str] = None,
              fail_fast: bool = False) -> bool:
    """
    Run the test suite.

    Args:
        verbosity: Test output verbosity (0-2)
        test_pattern: Pattern to match test files
        fail_fast: Stop on first failure

    Returns:
        True if all tests passed, False otherwise
    """
    print("=" * 70)
    print("Transcriptome Builder - Test Suite")
    print("=" * 70)

    suite = discover_tests(pattern=test_pattern or "test_*.py")
    test_count = suite.countTestCases()
    print(f"Discovered {test_count} tests")

    if test_count == 0:
        print("No tests found!")
        return False

    print("-" * 70)

    runner = unittest.TextTestRunner(verbosity=verbosity, failfast=fail_fast, buffer=True)
    start_time = time.time()
    result = runner.run(suite)
    return report(result, time.time() - start_time)


def run_specific_tests(test_names: List[str]) -> bool:
    """Run specific test classes, e.g. test_assembly.TestSequenceAssembler."""
    suite = unittest.TestSuite()
    loader = unittest.TestLoader()

    for test_name in test_names:
        if not test_name.startswith("transcriptome_builder."):
            test_name = f"transcriptome_builder.tests.{test_name}"
        try:
            suite.addTest(loader.loadTestsFromName(test_name))
        except (ImportError, AttributeError) as e:
            print(f"Could not load test {test_name}: {e}")
            return False

    runner = unittest.TextTestRunner(verbosity=2)
    start_time = time.time()
    result = runner.run(suite)
    return report(result, time.time() - start_time)


def main():
    """Main test runner entry point."""
    parser = argparse.ArgumentParser(description="Run transcriptome builder tests")
    parser.add_argument("-v", "--verbosity", type=int, choices=[0, 1, 2], default=2,
                        help="Test output verbosity")
    parser.add_argument("-f", "--fail-fast", action="store_true",
                        help="Stop on first failure")
    parser.add_argument("-p", "--pattern", type=str,
                        help="Pattern to match test files")
    parser.add_argument("-t", "--tests", nargs="+",
                        help="Specific test modules or classes to run")

    args = parser.parse_args()

    if args.tests:
        success = run_specific_tests(args.tests)
    else:
        success = run_tests(
            verbosity=args.verbosity,
            test_pattern=args.pattern,
            fail_fast=args.fail_fast
        )

    sys.exit(0 if success else 1)


if __name__ == "__main__":
    main()
