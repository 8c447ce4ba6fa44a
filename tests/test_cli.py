import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from padconf import cli


@patch("padconf.cli.setup_logging")
class TestCli(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.config_path = os.path.join(self.tmpdir.name, "config.toml")

    def tearDown(self):
        self.tmpdir.cleanup()

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(["--config", self.config_path, *argv])
        return code, out.getvalue(), err.getvalue()

    def test_languages_json(self, mock_logging):
        code, out, _ = self.run_cli("languages")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertIn("bash", data["parser_installs"])
        self.assertEqual(data["formatters_by_filetype"]["rust"], ["rustfmt"])
        self.assertIn("prettierd", data["ensure_installed"])

    def test_configuration_error_exits_nonzero(self, mock_logging):
        with open(self.config_path, "w", encoding="utf-8") as fh:
            fh.write("[languages.rust]\nformatters = [1]\n")
        code, out, err = self.run_cli("languages")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")
        self.assertIn("rust: formatter must be a string, got: int", err)

    def test_companion(self, mock_logging):
        impl = os.path.join(self.tmpdir.name, "src", "a.ts")
        os.makedirs(os.path.dirname(impl))
        for path in (impl, impl.replace(".ts", ".spec.ts")):
            open(path, "w").close()
        code, out, _ = self.run_cli("companion", impl)
        self.assertEqual(code, 0)
        self.assertEqual(out.strip(), impl.replace(".ts", ".spec.ts"))

    def test_companion_unknown(self, mock_logging):
        code, _, err = self.run_cli("companion", "notes.txt", "--markup")
        self.assertEqual(code, 1)
        self.assertIn("Unknown file type", err)

    def test_filetype(self, mock_logging):
        code, out, _ = self.run_cli("filetype", "deploy.sh")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual(data["filetype"], "sh")
        self.assertEqual(data["parser"], "bash")
        self.assertEqual(data["formatters"], ["shfmt"])

    def test_keys(self, mock_logging):
        code, out, _ = self.run_cli("keys")
        self.assertEqual(code, 0)
        self.assertIn("<leader>tt", out)
        self.assertIn("delete_quickfix_items", out)

    def test_guid(self, mock_logging):
        code, out, _ = self.run_cli("guid", "--template", "xxxx")
        self.assertEqual(code, 0)
        self.assertRegex(out.strip(), r"^[0-9a-f]{4}$")

    @patch("padconf.cli.ToolInstaller")
    def test_install_dry_run(self, mock_installer, mock_logging):
        installer = mock_installer.return_value
        installer.missing.return_value = ["shfmt"]
        installer.package_name.return_value = "shfmt"
        code, out, _ = self.run_cli("install", "--dry-run")
        self.assertEqual(code, 0)
        self.assertIn("shfmt -> shfmt", out)
        installer.install.assert_not_called()


if __name__ == '__main__':
    unittest.main()
