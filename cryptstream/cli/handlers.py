# cryptstream/cli/handlers.py
# -*- coding: utf-8 -*-
"""Command handler for the cryptstream CLI."""

import logging
import os
import sys

try:
    from cryptstream.cli.password_utils import (
        get_interactive_password,
        read_password_file,
        read_password_stdin,
        confirm_directory_run
    )
    from cryptstream.core.traversal import process_file, process_tree
    from cryptstream.utils.config import RunConfig
    from cryptstream.utils.exceptions import (
        FileAccessError, AuthenticationError, ArgumentError, MalformedContainerError,
        DerivationError, CryptstreamError
    )
    from cryptstream.utils.constants import (
        EXIT_SUCCESS, EXIT_GENERIC_ERROR, EXIT_FILE_ERROR, EXIT_AUTH_ERROR,
        EXIT_ARG_ERROR, EXIT_FORMAT_ERROR
    )
    from cryptstream.utils.secure_memory import sensitive_buffer
except ImportError as e:
     logging.critical(f"Handlers: Failed to import required modules: {e}", exc_info=True)
     raise

logger = logging.getLogger(__name__)

def _obtain_password(args) -> bytearray:
    if args.password_file:
        return read_password_file(args.password_file)
    if args.password_stdin:
        return read_password_stdin()
    return get_interactive_password()

def _run(config: RunConfig, args) -> int:
    if not os.path.exists(config.path):
        raise FileAccessError(f"Path not found: {config.path}")

    is_directory = os.path.isdir(config.path)
    if is_directory and args.password_stdin and not config.assume_yes:
        # stdin carries the password, so it cannot also answer the y/N question
        raise ArgumentError("--password-stdin with a directory requires --yes.")
    if is_directory and not config.assume_yes:
        if not confirm_directory_run(config.path, config.recursive):
            logger.info("Directory run declined by user. No files were touched.")
            return EXIT_SUCCESS

    # Password mismatch and empty input abort here, before any file is touched.
    with sensitive_buffer(_obtain_password(args)) as password:
        logger.debug("Password obtained.")
        if not is_directory:
            output = process_file(config.path, password, config)
            if output is None:
                logger.warning(f"Nothing to do for {config.path} in mode '{config.mode}'.")
            return EXIT_SUCCESS

        summary = process_tree(config, password)
        return EXIT_SUCCESS if summary.ok else EXIT_GENERIC_ERROR

def handle_run(args) -> int:
    """
    Handles one invocation: validates the root path, confirms directory runs,
    obtains the password, and processes the file or tree. Maps exceptions to
    exit codes. The password buffer is wiped on every exit path.
    """
    config = RunConfig.from_args(args)
    logger.debug(f"Run configuration: path={config.path} mode={config.mode} "
                 f"recursive={config.recursive} delete_source={config.delete_source}")

    try:
        return _run(config, args)

    # --- Exception Handling and Exit Code Mapping (most specific first) ---
    except AuthenticationError as e: # MAC check failure or password mismatch
        logger.error(f"Authentication error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_AUTH_ERROR
    except MalformedContainerError as e:
        logger.error(f"Malformed container: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FORMAT_ERROR
    except FileAccessError as e:
        logger.error(f"File access error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR
    except ArgumentError as e:
        logger.error(f"Argument error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_ARG_ERROR
    except DerivationError as e:
        logger.critical(f"Key derivation is misconfigured: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_GENERIC_ERROR
    except CryptstreamError as e:
        logger.error(f"Application error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_GENERIC_ERROR
