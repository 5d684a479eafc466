import sys
import io
import json
import shutil
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest.mock import MagicMock, patch

from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from bisaya_translator import main as cli
from bisaya_translator.config import Settings
from bisaya_translator.custom_translations import STORAGE_KEY


class TestCli(unittest.TestCase):
    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())
        self.settings = Settings(
            gemini_api_key="test-key",
            storage_path=self.tmp_dir / "local_storage.json",
            _env_file=None,
        )

    def tearDown(self):
        shutil.rmtree(self.tmp_dir, ignore_errors=True)

    def run_cli(self, *argv):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            code = cli.main(list(argv), settings=self.settings)
        return code, out.getvalue(), err.getvalue()

    def stored_rules(self):
        data = json.loads(self.settings.storage_path.read_text(encoding='utf-8'))
        return json.loads(data[STORAGE_KEY])

    def test_rules_add_list_delete(self):
        code, out, _ = self.run_cli('rules', 'add', 'church', 'iglesya')
        self.assertEqual(code, 0)
        self.assertIn("church -> iglesya", out)

        self.run_cli('rules', 'add', 'house', 'balay')
        self.assertEqual(self.stored_rules(), [
            {"english": "church", "bisaya": "iglesya"},
            {"english": "house", "bisaya": "balay"},
        ])

        code, out, _ = self.run_cli('rules', 'delete', '0')
        self.assertEqual(code, 0)
        self.assertEqual(self.stored_rules(), [{"english": "house", "bisaya": "balay"}])

        code, out, _ = self.run_cli('rules', 'list')
        self.assertEqual(out.strip(), "0\thouse -> balay")

    def test_rules_add_blank_fails(self):
        code, _, err = self.run_cli('rules', 'add', 'church', '  ')
        self.assertEqual(code, 1)
        self.assertIn("required", err)

    def test_rules_delete_bad_index_fails(self):
        code, _, err = self.run_cli('rules', 'delete', '4')
        self.assertEqual(code, 1)
        self.assertIn("index 4", err)

    @patch('bisaya_translator.main.GeminiClient')
    def test_translate_uses_stored_rules(self, client_cls):
        client_cls.return_value.translate_text.return_value = "Miadto ko sa iglesya."
        self.run_cli('rules', 'add', 'church', 'iglesya')

        code, out, _ = self.run_cli('translate', 'I', 'went', 'to', 'church.')

        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines()[-1], "Miadto ko sa iglesya.")
        text, rules = client_cls.return_value.translate_text.call_args.args
        self.assertEqual(text, "I went to church.")
        self.assertEqual(rules[0].bisaya, "iglesya")

    @patch('bisaya_translator.main.GeminiClient')
    def test_translate_strips_trailing_newline_from_file(self, client_cls):
        client_cls.return_value.translate_text.return_value = "Maayong buntag."
        text_path = self.tmp_dir / "input.txt"
        text_path.write_text("Good morning.\nSee you.\n", encoding='utf-8')

        code, _, _ = self.run_cli('translate', '--file', str(text_path))

        self.assertEqual(code, 0)
        text, _ = client_cls.return_value.translate_text.call_args.args
        self.assertEqual(text, "Good morning.\nSee you.")

    @patch('bisaya_translator.main.GeminiClient')
    def test_translate_strips_trailing_newline_from_stdin(self, client_cls):
        client_cls.return_value.translate_text.return_value = "Maayong buntag."

        with patch('sys.stdin', io.StringIO("Good morning.\n")):
            code, _, _ = self.run_cli('translate')

        self.assertEqual(code, 0)
        text, _ = client_cls.return_value.translate_text.call_args.args
        self.assertEqual(text, "Good morning.")

    @patch('bisaya_translator.main.GeminiClient')
    def test_translate_failure_exits_nonzero(self, client_cls):
        client_cls.return_value.translate_text.side_effect = RuntimeError("quota exceeded")

        with self.assertLogs('bisaya_translator.controller', level='ERROR'):
            code, _, err = self.run_cli('translate', 'hello')

        self.assertEqual(code, 1)
        self.assertIn("quota exceeded", err)

    @patch('bisaya_translator.main.GeminiClient')
    def test_extract_and_translate(self, client_cls):
        image_path = self.tmp_dir / "sign.png"
        Image.new('RGB', (30, 10), color='white').save(image_path)
        client = client_cls.return_value
        client.extract_text.return_value = "Welcome"
        client.translate_text.return_value = "Maayong pag-abot"

        code, out, _ = self.run_cli('extract', '--input', str(image_path), '--translate')

        self.assertEqual(code, 0)
        self.assertEqual(out.splitlines(), ["Welcome", "Maayong pag-abot"])
        image = client.extract_text.call_args.args[0]
        self.assertEqual(image.mime_type, "image/png")

    def test_extract_missing_file(self):
        code, _, err = self.run_cli('extract', '--input', str(self.tmp_dir / "nope.png"))
        self.assertEqual(code, 1)
        self.assertIn("not found", err)


if __name__ == '__main__':
    unittest.main()
