# SPDX-License-Identifier: AGPL-3.0-or-later
# pylint: disable=missing-module-docstring,disable=missing-class-docstring,invalid-name

from unittest.mock import patch

from typer.testing import CliRunner

from jivesearch import bangs
from jivesearch.bangs import cli
from tests import JiveTestCase


class TestBangsCli(JiveTestCase):

    def setUp(self):
        super().setUp()
        self.runner = CliRunner()

    def test_collisions_none(self):
        result = self.runner.invoke(cli.app, ["collisions"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("no trigger collisions", result.output)

    def test_collisions(self):
        shadowed = [
            bangs.Bang("First", ("x",), {"default": "https://first.org/{{{term}}}"}),
            bangs.Bang("Second", ("x",), {"default": "https://second.org/{{{term}}}"}),
        ]
        with patch.object(cli, "new", lambda: bangs.new(bangs=shadowed)):
            result = self.runner.invoke(cli.app, ["collisions"])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("!x: First shadows Second", result.output)

    def test_suggest(self):
        result = self.runner.invoke(cli.app, ["suggest", "am"])
        self.assertEqual(result.exit_code, 0)
        self.assertIn("!amazon", result.output)
        self.assertIn("Amazon", result.output)

    def test_suggest_size(self):
        result = self.runner.invoke(cli.app, ["suggest", "g", "--size", "2"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(len(result.output.splitlines()), 2)
