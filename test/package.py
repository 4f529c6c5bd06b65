"""
Package surface tests.

Scope
- Every name in flagship.__all__ resolves on the package.
- The package re-exports the public API of each submodule, and nothing private.
- version_info agrees with __version__.

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

import flagship
from flagship import faults, options, parser, registry


class TestPackage(TestCase):

    def testAllNamesResolve(self):
        for name in flagship.__all__:
            self.assertTrue(hasattr(flagship, name), name)

    def testSubmoduleApiIsReexported(self):
        for module in (faults, options, parser, registry):
            for name in module.__all__:
                self.assertIs(getattr(flagship, name), getattr(module, name))
                self.assertIn(name, flagship.__all__)

    def testNoDuplicateExports(self):
        self.assertEqual(len(flagship.__all__), len(set(flagship.__all__)))

    def testPrivateHelpersStayPrivate(self):
        self.assertNotIn("_Fault", flagship.__all__)
        self.assertNotIn("OptionType", flagship.__all__)

    def testVersionInfo(self):
        self.assertEqual(".".join(map(str, flagship.version_info)), flagship.__version__)


if __name__ == "__main__":
    unittest.main()
