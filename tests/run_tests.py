#!/usr/bin/env python3
"""
sandboxfs Test Runner
Runs every test module and prints a per-module summary
"""

import sys
import os
import unittest
import time
import logging
import importlib
from io import StringIO

# Add sandboxfs and the tests directory to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, os.path.dirname(__file__))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger('sandboxfs.TestRunner')

TEST_MODULES = [
    'test_path_utils',
    'test_flags',
    'test_filesystem',
    'test_config',
    'test_cli',
]


class SandboxTestRunner:
    """Main test runner for sandboxfs components"""

    def __init__(self, test_modules=None):
        self.test_modules = test_modules or TEST_MODULES
        self.results = {}
        self.total_duration = 0.0

    def run_single_module(self, module_name):
        """Run tests for a single module"""
        logger.info(f"Running tests for {module_name}")

        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.error(f"Failed to import {module_name}: {e}")
            self.results[module_name] = {'tests_run': 0, 'failures': 0, 'errors': 1,
                                         'skipped': 0, 'duration': 0.0, 'output': str(e)}
            return False

        suite = unittest.TestLoader().loadTestsFromModule(module)
        stream = StringIO()
        runner = unittest.TextTestRunner(stream=stream, verbosity=2)

        start_time = time.time()
        result = runner.run(suite)
        duration = time.time() - start_time

        self.results[module_name] = {
            'tests_run': result.testsRun,
            'failures': len(result.failures),
            'errors': len(result.errors),
            'skipped': len(result.skipped),
            'duration': duration,
            'output': stream.getvalue()
        }
        logger.info(f"Completed {module_name}: {result.testsRun} tests, "
                    f"{len(result.failures)} failures, {len(result.errors)} errors")
        return result.wasSuccessful()

    def run_all_tests(self):
        """Run all test modules"""
        start_time = time.time()
        ok = True
        for module_name in self.test_modules:
            ok = self.run_single_module(module_name) and ok
        self.total_duration = time.time() - start_time
        return ok

    def generate_report(self):
        """Print a summary table and the output of failing modules"""
        total_tests = sum(r['tests_run'] for r in self.results.values())
        total_bad = sum(r['failures'] + r['errors'] for r in self.results.values())

        print("\n" + "=" * 72)
        print("SANDBOXFS TEST REPORT")
        print("=" * 72)
        print(f"{'Module':<25} {'Tests':<8} {'Fail':<8} {'Error':<8} {'Skip':<8} {'Time':<8}")
        print("-" * 72)
        for module_name, result in self.results.items():
            print(f"{module_name:<25} {result['tests_run']:<8} {result['failures']:<8} "
                  f"{result['errors']:<8} {result['skipped']:<8} {result['duration']:<7.2f}s")
        print("-" * 72)
        print(f"Total: {total_tests} tests, {total_bad} failing, {self.total_duration:.2f}s")

        for module_name, result in self.results.items():
            if result['failures'] or result['errors']:
                print(f"\n{module_name.upper()}:")
                print(result['output'])


def main():
    runner = SandboxTestRunner(sys.argv[1:] or None)
    ok = runner.run_all_tests()
    runner.generate_report()
    return 0 if ok else 1


if __name__ == '__main__':
    sys.exit(main())
