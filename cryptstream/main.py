# main.py
#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""Main entry point for the cryptstream CLI application."""

import argparse
import sys
import logging

from .cli.handlers import handle_run
from .utils.config import MODES, MODE_AUTO
from .utils.constants import ENCRYPTED_SUFFIX, EXIT_SUCCESS, EXIT_GENERIC_ERROR, EXIT_INTERRUPT

def create_parser():
    """Creates and configures the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cryptstream",
        description=(
            "Password-based file encryption (Argon2id + chunked XChaCha20-Poly1305). "
            f"Files ending in '{ENCRYPTED_SUFFIX}' are decrypted, all others are encrypted."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""Examples:
  cryptstream notes.txt                      # -> notes.txt{ENCRYPTED_SUFFIX}, removes notes.txt
  cryptstream notes.txt{ENCRYPTED_SUFFIX}            # -> notes.txt, removes the container
  cryptstream -r -y --keep ~/Documents       # whole tree, keep the originals
  echo 'mypassword' | cryptstream --password-stdin -y -m decrypt backup/
"""
    )
    parser.add_argument('-V', '--version', action='version', version='%(prog)s 0.1.0')

    # --- Logging Control Group ---
    log_level_group = parser.add_mutually_exclusive_group()
    log_level_group.add_argument(
        '-q', '--quiet',
        action='store_const',
        const=logging.ERROR,
        dest='log_level',
        help='Show only error messages.'
    )
    log_level_group.add_argument(
        '-v', '--verbose',
        action='store_const',
        const=logging.DEBUG,
        dest='log_level',
        help='Show detailed debug messages.'
    )
    parser.set_defaults(log_level=logging.INFO)

    parser.add_argument('path', nargs='?', default='.', metavar='PATH',
                        help='File or directory to process (default: current directory).')
    parser.add_argument('-r', '--recursive', action='store_true',
                        help='Also process files in subdirectories.')
    parser.add_argument('-m', '--mode', choices=MODES, default=MODE_AUTO,
                        help=f"'auto' picks per file from the '{ENCRYPTED_SUFFIX}' suffix; "
                             "'encrypt'/'decrypt' skip files of the other kind (default: auto).")
    parser.add_argument('-k', '--keep', action='store_true',
                        help='Keep the source file after a successful operation (default: remove it).')
    parser.add_argument('-y', '--yes', action='store_true',
                        help='Do not ask for confirmation before processing a directory.')

    pw_group = parser.add_mutually_exclusive_group()
    pw_group.add_argument('--password-file', type=str, metavar='FILE',
                          help='File containing the password (first line).')
    pw_group.add_argument('--password-stdin', action='store_true',
                          help='Read password from piped stdin.')

    return parser

def main():
    """Main execution function: parses arguments, sets up logging, and calls the handler."""
    parser = create_parser()
    exit_code = EXIT_SUCCESS

    try:
        args = parser.parse_args()

        # --- Configure Logging ---
        log_level = args.log_level
        log_format = '%(asctime)s - %(levelname)s - %(message)s'
        if log_level <= logging.DEBUG:
            log_format = '%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s'

        logging.basicConfig(level=log_level, format=log_format, stream=sys.stderr, force=True)

        logging.debug(f"Log level set to: {logging.getLevelName(log_level)}")
        # Security: never log the args namespace wholesale.

        exit_code = handle_run(args)

    except SystemExit as e:
        # argparse help/version, or Ctrl+C captured in password_utils
        exit_code = e.code or EXIT_SUCCESS
    except KeyboardInterrupt:
        print("\nOperation cancelled by user.", file=sys.stderr)
        exit_code = EXIT_INTERRUPT
    except Exception as e:
        logging.critical(f"An unhandled exception reached main: {e}", exc_info=True)
        print(f"\nCritical Error: An unexpected error occurred. Use --verbose for more details.", file=sys.stderr)
        exit_code = EXIT_GENERIC_ERROR
    finally:
        logging.debug(f"Exiting with code: {exit_code}")
        sys.exit(exit_code)

if __name__ == "__main__":
    main()
