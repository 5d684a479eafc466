import sys
import unittest
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from bisaya_translator.custom_translations import CustomTranslation
from bisaya_translator.prompts import build_translation_prompt, format_rule


class TestTranslationPrompt(unittest.TestCase):
    def test_plain_prompt_without_rules(self):
        prompt = build_translation_prompt("Good morning.")
        self.assertEqual(prompt, 'Translate the following English text to Bisaya: "Good morning."')

    def test_one_clause_per_rule(self):
        rules = [
            CustomTranslation("church", "iglesya"),
            CustomTranslation("house", "balay"),
            CustomTranslation("church", "simbahan"),
        ]
        prompt = build_translation_prompt("I went to church.", rules)

        self.assertEqual(prompt.count("must be translated as"), 3)
        self.assertIn(
            "'church' must be translated as 'iglesya', "
            "'house' must be translated as 'balay', "
            "'church' must be translated as 'simbahan'",
            prompt,
        )
        self.assertIn("Do not deviate from these rules.", prompt)
        self.assertTrue(prompt.endswith('"I went to church."'))

    def test_rule_values_are_trimmed(self):
        self.assertEqual(
            format_rule(CustomTranslation("  church ", " iglesya ")),
            "'church' must be translated as 'iglesya'",
        )

    def test_source_text_is_quoted_literally(self):
        text = 'He said "hello"\nand left.'
        prompt = build_translation_prompt(text, [CustomTranslation("hello", "kumusta")])
        self.assertTrue(prompt.endswith(f'"{text}"'))


if __name__ == '__main__':
    unittest.main()
