"""Command line entry point"""

import argparse
import dataclasses
import hashlib
import logging
import os
import sys
from pathlib import Path

from .commands import CommandSlots
from .config import load_config, DEFAULT_CONFIG_PATH
from .data_store import DataStore
from .errors import TmuxSlotsError
from .session import setup
from .tmux_control import TmuxController, check_tmux

LOG_DIR = Path.home() / ".config" / "tmux-slots" / "logs"
LOG_FILE = LOG_DIR / "tmux-slots.log"

logger = logging.getLogger(__name__)


def _setup_logging(debug: bool) -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        handlers=[
            logging.FileHandler(LOG_FILE, encoding='utf-8'),
        ]
    )


def project_namespace(project: str) -> str:
    """Short stable id of a project directory, used to tag its windows"""
    return hashlib.sha1(project.encode('utf-8')).hexdigest()[:12]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='tmux-slots',
        description='tmux-slots - numbered tmux terminals with stored commands',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  tmux-slots add "make test"        # store a command in the first free slot
  tmux-slots list                   # show stored commands
  tmux-slots send 1 --cmd 1         # run stored command 1 in terminal 1
  tmux-slots send 2 "ls %s" --arg src
  tmux-slots goto 1                 # focus terminal 1
  tmux-slots rm 1                   # remove command 1, later ones move up
  tmux-slots --check                # check the environment

Config: ~/.config/tmux-slots/config.yaml
        """
    )

    parser.add_argument('--check', '-c', action='store_true', help='check the environment')
    parser.add_argument('--version', '-v', action='store_true', help='show version')
    parser.add_argument('--debug', action='store_true', help='enable debug logging')
    parser.add_argument('--project', default=None,
                        help='project directory the commands belong to (default: cwd)')
    parser.add_argument('--config', type=Path, default=None, help='config file path')

    sub = parser.add_subparsers(dest='command')

    sub.add_parser('list', help='list stored commands')

    p = sub.add_parser('add', help='store a command in the first free slot')
    p.add_argument('cmd')

    p = sub.add_parser('rm', help='remove a stored command')
    p.add_argument('index', type=int)

    p = sub.add_parser('set', help='replace every stored command')
    p.add_argument('cmds', nargs='*')

    p = sub.add_parser('goto', help='focus the terminal of a slot')
    p.add_argument('slot', type=int)

    p = sub.add_parser('send', help='send text or a stored command to a slot')
    p.add_argument('slot', type=int)
    p.add_argument('text', nargs='?', default=None)
    p.add_argument('--cmd', type=int, default=None, dest='cmd_index',
                   help='index of a stored command to send')
    p.add_argument('--arg', action='append', default=[], dest='format_args',
                   help='positional substitution for %%s in the command')

    return parser


def main(argv=None):
    """Main entry"""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        from . import __version__
        print(f"tmux-slots v{__version__}")
        return 0

    _setup_logging(args.debug)

    if args.check:
        return check_environment(args.config)

    if args.command is None:
        parser.print_help()
        return 1

    config = load_config(args.config)
    project = os.path.abspath(args.project or os.getcwd())
    store = DataStore()
    term_config = store.load_term_config(project)
    commands = CommandSlots(
        term_config,
        on_change=lambda: store.save_term_config(project, term_config),
        save_on_change=config.global_settings.save_on_change,
    )
    # Windows outlive this process; later runs find them again by their tag
    settings = dataclasses.replace(config.global_settings, tmux_autoclose_windows=False)
    session = setup(
        options=config.tmux_options(),
        settings=settings,
        commands=commands,
        tmux=TmuxController(timeout=config.tmux.timeout),
        tag_namespace=project_namespace(project),
    )

    try:
        if args.command == 'list':
            for idx in range(1, session.get_length() + 1):
                print(f"{idx:>3}  {commands.get_command(idx) or ''}")
        elif args.command == 'add':
            idx = session.add_command(args.cmd)
            print(f"added to slot {idx}")
        elif args.command == 'rm':
            if not session.is_valid_index(args.index):
                print(f"Error: no command at index {args.index}", file=sys.stderr)
                return 1
            session.remove_command(args.index)
        elif args.command == 'set':
            session.replace_command_list(args.cmds)
        elif args.command == 'goto':
            session.goto_terminal(args.slot)
        elif args.command == 'send':
            cmd = args.cmd_index if args.cmd_index is not None else args.text
            if cmd is None:
                print("Error: give TEXT or --cmd INDEX", file=sys.stderr)
                return 1
            session.send_command(args.slot, cmd, *args.format_args)
    except TmuxSlotsError as e:
        logger.error(f"[cli] {args.command} failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


def check_environment(config_path: Path = None):
    """Check the environment"""
    print("Checking environment...\n")
    all_ok = True

    ok, msg = check_tmux()
    if ok:
        print(f"✅ tmux: {msg}")
    else:
        print(f"❌ tmux: {msg}")
        all_ok = False

    if os.environ.get('TMUX'):
        print("✅ running inside tmux")
    else:
        print("❌ not inside tmux: goto needs an attached client")
        all_ok = False

    path = config_path or DEFAULT_CONFIG_PATH
    if path.exists():
        print(f"✅ config: {path}")
    else:
        print(f"ℹ️  config: {path} not found, using defaults")

    print()
    if all_ok:
        print("✓ all checks passed")
    else:
        print("✗ some checks failed, see above")

    return 0 if all_ok else 1


if __name__ == '__main__':
    sys.exit(main())
