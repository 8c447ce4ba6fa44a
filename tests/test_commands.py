import random
import re
import subprocess
import unittest
from unittest.mock import MagicMock, patch

import pyperclip

from padconf.commands import (
    EditorCommands,
    copy_path,
    generate_identifier,
    insert_identifier,
    search_infrastructure,
    search_string_for,
)
from padconf.companion import CompanionStatus
from padconf.editor import HeadlessEditor
from padconf.tmux import TmuxPane


class TestIdentifier(unittest.TestCase):

    def test_default_template(self):
        identifier = generate_identifier(rng=random.Random(7))
        self.assertRegex(identifier, r"^[0-9a-f]{8}$")

    def test_y_nibble_is_variant(self):
        for seed in range(20):
            identifier = generate_identifier("y", rng=random.Random(seed))
            self.assertIn(identifier, "89ab")

    def test_literal_characters_kept(self):
        self.assertTrue(re.fullmatch(r"id-[0-9a-f]{2}", generate_identifier("id-xx")))

    def test_insert_at_cursor(self):
        editor = HeadlessEditor(lines=["const id = ;"])
        editor.set_cursor(1, 11)
        identifier = insert_identifier(editor, rng=random.Random(1))
        self.assertEqual(editor.current_line(), f"const id = {identifier};")

    def test_insert_between_quotes(self):
        editor = HeadlessEditor(lines=["key: ''"])
        editor.set_cursor(1, 5)
        identifier = insert_identifier(editor, template="xxxx", rng=random.Random(3))
        self.assertEqual(editor.current_line(), f"key: '{identifier}'")

    def test_insert_between_double_quotes(self):
        editor = HeadlessEditor(lines=['""'])
        editor.set_cursor(1, 0)
        identifier = insert_identifier(editor, rng=random.Random(4))
        self.assertEqual(editor.current_line(), f'"{identifier}"')


class TestCopyPath(unittest.TestCase):

    @patch("padconf.commands.pyperclip.copy")
    def test_copies_relative_path(self, mock_copy):
        editor = HeadlessEditor("/repo/src/app.ts")
        with patch.object(HeadlessEditor, "relative_path", return_value="src/app.ts"):
            self.assertTrue(copy_path(editor))
        mock_copy.assert_called_once_with("src/app.ts")
        self.assertEqual(editor.last_message, "Copied src/app.ts")

    @patch("padconf.commands.pyperclip.copy", side_effect=pyperclip.PyperclipException("no xclip"))
    def test_clipboard_failure_is_reported(self, mock_copy):
        editor = HeadlessEditor("/repo/src/app.ts")
        self.assertFalse(copy_path(editor))
        self.assertIn("Clipboard unavailable", editor.last_message)

    @patch("padconf.commands.pyperclip.copy")
    def test_unnamed_buffer(self, mock_copy):
        editor = HeadlessEditor()
        self.assertFalse(copy_path(editor))
        mock_copy.assert_not_called()

    @patch("padconf.commands.pyperclip.copy")
    def test_disabled_clipboard(self, mock_copy):
        editor = HeadlessEditor("/repo/a.ts")
        self.assertFalse(copy_path(editor, use_system_clipboard=False))
        mock_copy.assert_not_called()


class TestSearchInfrastructure(unittest.TestCase):

    def test_search_string(self):
        self.assertEqual(
            search_string_for("/home/me/api/src/orders/create.ts"),
            "src/orders/create.handler",
        )

    def test_last_src_segment_is_used(self):
        self.assertEqual(search_string_for("/src/app/src/x.ts", ".main"), "src/x.main")

    def test_no_search_string(self):
        editor = HeadlessEditor("/repo/lib/x.ts")
        self.assertIsNone(search_infrastructure(editor))
        self.assertEqual(editor.last_message, "no search string found")
        self.assertEqual(editor.searches, [])

    def test_greps(self):
        editor = HeadlessEditor("/repo/src/jobs/run.ts")
        search_infrastructure(editor)
        self.assertEqual(editor.searches, ["src/jobs/run.handler"])


class TestEditorCommands(unittest.TestCase):

    def setUp(self):
        self.runner = MagicMock(return_value=subprocess.CompletedProcess([], 0, stdout="%1\n", stderr=""))
        self.editor = HeadlessEditor("/repo/lib/thing.go")
        config = {
            "companion": {"test": [{"pattern": r"\.go$", "replacement": "_test.go", "label": "test"}]},
            "search": {"suffix": ".fn"},
        }
        self.commands = EditorCommands(self.editor, config, tmux=TmuxPane(runner=self.runner))

    def test_actions_cover_every_command(self):
        self.assertEqual(set(self.commands.actions()), {
            "toggle_test", "toggle_markup", "delete_quickfix_items", "insert_identifier",
            "copy_path", "search_infrastructure", "tmux_open", "tmux_repeat",
        })

    def test_configured_companion_rule(self):
        with patch("padconf.companion.os.path.exists", return_value=True):
            result = self.commands.toggle_test()
        self.assertEqual(result.status, CompanionStatus.SWITCHED)
        self.assertEqual(self.editor.current_path(), "/repo/lib/thing_test.go")

    def test_search_suffix_from_config(self):
        self.editor.path = "/repo/src/a.ts"
        self.assertEqual(self.commands.search_infrastructure(), "src/a.fn")

    def test_tmux_repeat(self):
        self.assertTrue(self.commands.tmux_repeat())
        self.runner.assert_called_with(["tmux", "send-keys", "-t", "%1", "Up", "Enter"])

    def test_delete_quickfix_items(self):
        self.editor.quickfix = ["a", "b"]
        self.commands.delete_quickfix_items()
        self.assertEqual(self.editor.quickfix, ["b"])


if __name__ == '__main__':
    unittest.main()
