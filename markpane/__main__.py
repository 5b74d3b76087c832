"""Markpane CLI entry point.

Allows running via `python -m markpane` and provides the console script
defined in `pyproject.toml`.
"""

from __future__ import annotations

import logging
import sys
from typing import List, Optional

from .config import RENDERER_CHOICES
from .version import get_version_string

USAGE = "usage: markpane [--version] [--keytest] [--renderer {auto,markdown,c}] [--log-file PATH] [filename]"


def _escape_bytes(s: str) -> str:
    """Return a printable representation of raw key string."""
    return s.encode('unicode_escape').decode('ascii')


def run_keyboard_test() -> None:
    """Print the editor's parsed key events until ESC is pressed."""
    from .terminal import TerminalInterface
    from .keyboard import KeyboardHandler, KeyEvent, KeyType

    print("Keyboard test mode - press keys to see parsed events.")
    print("Quit with ESC.")

    term = TerminalInterface()
    term.setup()
    old_settings = term.disable_flow_control()
    kb = KeyboardHandler(term)

    try:
        while True:
            ev: Optional[KeyEvent] = kb.get_key_event(timeout=None)
            if not ev:
                continue
            if ev.key_type == KeyType.SPECIAL and ev.value == 'escape':
                print("Exiting keyboard test.")
                break
            print(f"type={ev.key_type.value} value={ev.value} raw='{_escape_bytes(ev.raw)}'\r")
    finally:
        term.restore_settings(old_settings)
        term.cleanup()


def parse_args(args: List[str]) -> dict:
    """Parse the command line into an options dict.

    Raises ValueError on an unknown option or a missing option value.
    """
    options = {'version': False, 'keytest': False, 'renderer': None,
               'log_file': None, 'filename': None}
    it = iter(args)
    for arg in it:
        if arg in ("--version", "-V"):
            options['version'] = True
        elif arg in ('--keytest', '--keyboard-test'):
            options['keytest'] = True
        elif arg in ('--renderer', '--log-file'):
            value = next(it, None)
            if value is None:
                raise ValueError(f"{arg} needs a value")
            if arg == '--renderer':
                if value not in RENDERER_CHOICES:
                    raise ValueError(f"unknown renderer {value!r}")
                options['renderer'] = value
            else:
                options['log_file'] = value
        elif arg.startswith('-') and arg != '-':
            raise ValueError(f"unknown option {arg}")
        elif options['filename'] is None:
            options['filename'] = arg
        else:
            raise ValueError("only one file can be opened")
    return options


def main() -> None:
    try:
        options = parse_args(sys.argv[1:])
    except ValueError as e:
        print(f"markpane: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    if options['version']:
        print(get_version_string())
        return
    if options['log_file']:
        # The fullscreen UI owns the terminal, so logs only ever go to a file
        logging.basicConfig(
            filename=options['log_file'],
            level=logging.DEBUG,
            format="%(asctime)s %(name)s %(levelname)s: %(message)s",
        )
    if options['keytest']:
        run_keyboard_test()
        return

    # Lazy import to avoid importing UI deps for --version
    from .config import load_config
    from .editor import Editor
    from .settings_persistence import get_persistence

    config = load_config().with_overrides(renderer=options['renderer'])
    editor = Editor(config=config, persistence=get_persistence())
    if options['filename']:
        editor.load_file(options['filename'])
    editor.run()


if __name__ == "__main__":  # pragma: no cover
    main()
