"""
Command-line entry point for the Bisaya image translator.

Shares the custom translation list with the Streamlit app through the
same storage file.
"""

import argparse
import logging
import sys
from pathlib import Path

from bisaya_translator.config import Settings, configure_logging, get_settings
from bisaya_translator.controller import TranslatorController
from bisaya_translator.gemini_client import GeminiClient
from bisaya_translator.image_utils import ImageUpload
from bisaya_translator.storage import JsonFileStore

logger = logging.getLogger(__name__)


def build_controller(settings: Settings) -> TranslatorController:
    store = JsonFileStore(settings.storage_path)
    return TranslatorController(store, client_factory=lambda: GeminiClient(settings))


def cmd_extract(controller: TranslatorController, args) -> int:
    if not Path(args.input).is_file():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1
    try:
        image = ImageUpload.from_path(args.input)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    controller.select_image(image)
    state = controller.extract_text()
    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1
    print(state.source_text)

    if args.translate:
        if not state.source_text:
            print("Error: no text found in image", file=sys.stderr)
            return 1
        return _translate_and_print(controller)
    return 0


def cmd_translate(controller: TranslatorController, args) -> int:
    if args.file:
        text = Path(args.file).read_text(encoding='utf-8').rstrip("\n")
    elif args.text:
        text = " ".join(args.text)
    else:
        text = sys.stdin.read().rstrip("\n")
    controller.set_source_text(text)
    return _translate_and_print(controller)


def _translate_and_print(controller: TranslatorController) -> int:
    state = controller.translate_text()
    if state.error:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1
    print(state.translated_text)
    return 0


def cmd_rules(controller: TranslatorController, args) -> int:
    if args.rules_command == 'add':
        before = len(controller.state.custom_translations)
        state = controller.add_translation(args.english, args.bisaya)
        if len(state.custom_translations) == before:
            print("Error: both the English word and the Bisaya translation are required", file=sys.stderr)
            return 1
    elif args.rules_command == 'delete':
        count = len(controller.state.custom_translations)
        if not 0 <= args.index < count:
            print(f"Error: no custom translation at index {args.index}", file=sys.stderr)
            return 1
        controller.delete_translation(args.index)

    for i, item in enumerate(controller.state.custom_translations):
        print(f"{i}\t{item.english} -> {item.bisaya}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Image Translator - Extract English text from images and translate it to Bisaya"
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    extract = subparsers.add_parser('extract', help='Read English text from an image')
    extract.add_argument('--input', '-i', required=True, help='Path to input image')
    extract.add_argument('--translate', '-t', action='store_true',
                         help='Also translate the extracted text to Bisaya')

    translate = subparsers.add_parser('translate', help='Translate English text to Bisaya')
    translate.add_argument('text', nargs='*', help='Text to translate (default: read stdin)')
    translate.add_argument('--file', '-f', help='Read the text to translate from a file')

    rules = subparsers.add_parser('rules', help='Manage custom translations')
    rules_sub = rules.add_subparsers(dest='rules_command', required=True)
    rules_sub.add_parser('list', help='List custom translations')
    add = rules_sub.add_parser('add', help='Add a custom translation')
    add.add_argument('english')
    add.add_argument('bisaya')
    delete = rules_sub.add_parser('delete', help='Delete a custom translation by index')
    delete.add_argument('index', type=int)

    return parser


COMMANDS = {
    'extract': cmd_extract,
    'translate': cmd_translate,
    'rules': cmd_rules,
}


def main(argv=None, settings: Settings = None) -> int:
    """Main entry point"""
    args = build_parser().parse_args(argv)
    settings = settings or get_settings()
    configure_logging(settings)

    controller = build_controller(settings)
    try:
        return COMMANDS[args.command](controller, args)
    finally:
        controller.close()


if __name__ == "__main__":
    sys.exit(main())
