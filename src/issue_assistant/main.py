#!/usr/bin/env python3
"""
Main entry point for the github-issue-assistant application.

This script can be run in two modes:
1. HTTP server mode (default): Starts a FastAPI web server
2. Stdin mode: Reads a single JSON request from stdin and processes it

Usage:
    issue-assistant                    # Run HTTP server
    issue-assistant --stdin            # Process single request from stdin
"""

import sys
import logging
import warnings

from issue_assistant.config import AssistantConfig

# Configure logging - only if not already configured
# This prevents duplicate handlers when libraries also configure logging
root_logger = logging.getLogger()
if not root_logger.handlers:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True
    )

# Remove duplicate handlers if they exist
if len(root_logger.handlers) > 1:
    handlers_to_keep = [root_logger.handlers[0]]
    root_logger.handlers = handlers_to_keep

# Suppress pydantic warnings
warnings.filterwarnings('ignore', category=UserWarning, module='pydantic')


def main():
    config = AssistantConfig()

    if len(sys.argv) > 1 and sys.argv[1] == "--stdin":
        # Run in stdin mode for single request processing
        from issue_assistant.server.stdin_handler import StdinHandler
        handler = StdinHandler(config)
        handler.process_stdin_request()
    else:
        # Run in HTTP server mode (default)
        from issue_assistant.api.app import run_http_server
        run_http_server(host=config.host, port=config.port, config=config)


if __name__ == "__main__":
    main()
