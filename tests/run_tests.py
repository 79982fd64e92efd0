#!/usr/bin/env python3
"""
Test runner for the Spaces board engine

Usage:
    python3 tests/run_tests.py                          # every test module
    python3 tests/run_tests.py playability board_cache  # only these modules
"""

import sys
import os
import importlib.util


def run_test_file(test_file):
    """Run every test_* function in a single test file"""
    print(f"\n{'='*50}")
    print(f"Running {os.path.basename(test_file)}")
    print(f"{'='*50}")

    try:
        # Add the parent directory to sys.path so we can import the engine modules
        parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
        sys.path.insert(0, parent_dir)

        name = os.path.splitext(os.path.basename(test_file))[0]
        spec = importlib.util.spec_from_file_location(name, test_file)
        test_module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(test_module)

        for attr in sorted(dir(test_module)):
            test = getattr(test_module, attr)
            if attr.startswith('test_') and callable(test):
                test()

        print(f"✓ {os.path.basename(test_file)} completed successfully")
        return True
    except Exception as e:
        print(f"✗ {os.path.basename(test_file)} failed: {e!r}")
        return False


def select_test_files(tests_dir, names=None):
    """
    Test files in tests_dir, optionally narrowed to the given modules.

    Names may be given with or without the test_ prefix and .py suffix:
    "playability", "test_playability" and "test_playability.py" all match.
    """
    wanted = None
    if names:
        wanted = set()
        for name in names:
            name = os.path.basename(name)
            if name.endswith('.py'):
                name = name[:-3]
            if not name.startswith('test_'):
                name = 'test_' + name
            wanted.add(name)

    test_files = []
    for file in sorted(os.listdir(tests_dir)):
        if not (file.endswith('.py') and file.startswith('test_')):
            continue
        if wanted is not None and file[:-3] not in wanted:
            continue
        test_files.append(os.path.join(tests_dir, file))
    return test_files


def main(argv=None):
    """Run all tests in the tests directory, or only the modules named on the command line"""
    names = sys.argv[1:] if argv is None else argv
    tests_dir = os.path.dirname(os.path.abspath(__file__))

    print("Running Spaces Board Engine Tests")
    print("=" * 50)

    test_files = select_test_files(tests_dir, names)

    if not test_files:
        print("No test files found!")
        sys.exit(1)

    print(f"Found {len(test_files)} test files:")
    for test_file in test_files:
        print(f"  - {os.path.basename(test_file)}")

    passed = 0
    failed = 0

    for test_file in test_files:
        if run_test_file(test_file):
            passed += 1
        else:
            failed += 1

    # Summary
    print(f"\n{'='*50}")
    print("Test Summary")
    print(f"{'='*50}")
    print(f"Passed: {passed}")
    print(f"Failed: {failed}")
    print(f"Total: {passed + failed}")

    if failed == 0:
        print("\n🎉 All tests passed!")
    else:
        print(f"\n❌ {failed} test(s) failed")
        sys.exit(1)


if __name__ == "__main__":
    main()
