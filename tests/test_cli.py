import json
import os
import tempfile
import unittest
from unittest import mock

import symserv.cli as cli
from symserv.api.server import app


class TestCLI(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def _write(self, doc) -> str:
        path = os.path.join(self.tmp.name, "script.json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(doc, f)
        return path

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            args = cli.parse_args([])
        self.assertEqual(args.symbol_file, "script.json")
        self.assertEqual(args.port, 50204)

    def test_env_overrides(self):
        env = {"SYMSERV_SYMBOL_FILE": "dump.json", "SYMSERV_PORT": "6000"}
        with mock.patch.dict(os.environ, env, clear=True):
            args = cli.parse_args(["-p", "7000"])
        self.assertEqual(args.symbol_file, "dump.json")
        self.assertEqual(args.port, 7000)

    def test_bad_port(self):
        with self.assertRaises(SystemExit) as cm:
            cli.parse_args(["--port", "70000"])
        self.assertEqual(cm.exception.code, 2)

    def test_malformed_catalog_exits_before_serving(self):
        path = self._write({
            "ScriptMethod": [{"Name": "Foo", "Signature": "void Foo()", "TypeSignature": "v"}],
            "ScriptString": [],
            "ScriptMetadata": [],
            "ScriptMetadataMethod": [],
        })
        with mock.patch.object(app, "run") as run:
            rc = cli.main(["-s", path])
        self.assertNotEqual(rc, 0)
        run.assert_not_called()

    def test_bad_env_port_is_usage_error(self):
        for value in ("abc", "70000"):
            with mock.patch.dict(os.environ, {"SYMSERV_PORT": value}, clear=True):
                with self.assertRaises(SystemExit) as cm:
                    cli.parse_args([])
            self.assertEqual(cm.exception.code, 2, value)

    def test_non_text_string_exits_before_serving(self):
        path = self._write({
            "ScriptMethod": [],
            "ScriptString": [{"Address": 16, "Value": "\ud800x"}],
            "ScriptMetadata": [],
            "ScriptMetadataMethod": [],
            "Addresses": [],
        })
        with mock.patch.object(app, "run") as run:
            rc = cli.main(["-s", path])
        self.assertEqual(rc, 1)
        run.assert_not_called()

    def test_missing_catalog_exits_before_serving(self):
        with mock.patch.object(app, "run") as run:
            rc = cli.main(["-s", os.path.join(self.tmp.name, "missing.json")])
        self.assertEqual(rc, 1)
        run.assert_not_called()

    def test_loads_and_serves(self):
        path = self._write({
            "ScriptMethod": [{"Address": 16, "Name": "A", "Signature": "void A()", "TypeSignature": "v"}],
            "ScriptString": [],
            "ScriptMetadata": [],
            "ScriptMetadataMethod": [],
            "Addresses": [],
        })
        with mock.patch.object(app, "run") as run:
            rc = cli.main(["-s", path, "-p", "50300"])
        self.assertEqual(rc, 0)
        run.assert_called_once()
        self.assertEqual(run.call_args.kwargs["port"], 50300)
        self.assertEqual(run.call_args.kwargs["host"], "localhost")
        app.testing = True
        rv = app.test_client().get("/7100000014")
        self.assertEqual(rv.get_data(as_text=True), "7100000010+4 void A()")


if __name__ == "__main__":
    unittest.main()
