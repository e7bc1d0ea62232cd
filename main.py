"""Entry point: parse options, load mappings, listen to MIDI and send keys."""

import argparse
import logging
import sys

from midi_perform.config import Settings
from midi_perform.dispatch import AppState
from midi_perform.injector import PynputInjector, RecordingInjector
from midi_perform.keygen import KeyGen
from midi_perform.log_config import setup_logging
from midi_perform.mappings import MappingImportError, NoteMappings
from midi_perform.ports import DeviceWatcher, list_devices
from midi_perform.presets import performance_layout
from midi_perform.version import __version__


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='midi-perform',
        description='Accepts MIDI controller data and simulates keyboard presses',
    )
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    parser.add_argument('-l', '--list', action='store_true', help='List available devices')
    parser.add_argument('-d', '--device', action='append', default=[], metavar='DEVICE',
                        help='Connect to specified device (repeat for several)')
    parser.add_argument('-m', '--mappings', metavar='FILE',
                        help='Import note mappings: "<note> <channel> <down key> <up key>" per line')
    parser.add_argument('--no-builtin', action='store_true', help='Do not load the built-in piano/pad layout')
    parser.add_argument('--modifier-delay', type=int, default=Settings.modifier_delay_ms, metavar='MS',
                        help='Settle time after a modifier change')
    parser.add_argument('--dry-run', action='store_true', help='Log key events instead of sending them')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging on stderr')
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    return Settings(
        modifier_delay_ms=args.modifier_delay,
        devices=list(args.device),
        mapping_file=args.mappings,
        builtin_layout=not args.no_builtin,
        dry_run=args.dry_run,
        verbose=args.verbose,
    )


def build_state(settings: Settings, injector=None) -> AppState:
    """Key driver + mapping table. Imported mappings come before the built-in layout so they win lookups."""
    if injector is None:
        injector = RecordingInjector() if settings.dry_run else PynputInjector()
    mappings = NoteMappings()
    if settings.mapping_file:
        mappings.import_file(settings.mapping_file)
    if settings.builtin_layout:
        mappings.extend(performance_layout(settings))
    keygen = KeyGen(injector, modifier_delay_ms=settings.modifier_delay_ms)
    return AppState(keygen, mappings)


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)
    setup_logging(settings.verbose)
    log = logging.getLogger("midi_perform.main")

    if args.list:
        print('Available MIDI devices:')
        for name in list_devices():
            print(f'    {name}')
        return 0

    try:
        state = build_state(settings)
    except (OSError, MappingImportError, RuntimeError) as e:
        log.error("Startup error: %s", e)
        return 1
    log.info("%d mapping(s) loaded", len(state.mappings))

    watcher = DeviceWatcher(state, settings.devices, settings.poll_interval_sec)
    try:
        watcher.run()
    except KeyboardInterrupt:
        log.info("Stopping")
    finally:
        watcher.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
