#!/usr/bin/env python3
"""
Real-time Chat Client - Main Entry Point

Terminal client driving the synchronization core: connects to the chat
server, authenticates with a username and sends each line typed on stdin as
a chat message.

Usage:
    python main_client.py [--url URL] [--username NAME] [--log-level LEVEL]
"""

import sys
import os
import argparse
import asyncio
import logging

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from common.constants import DEFAULT_BACKEND_URL


def run_cli_client(username: str = None, url: str = DEFAULT_BACKEND_URL):
    """Run the CLI client."""
    from client.main_client import ChatClient
    from client.utils.config import ClientConfig
    from client.utils.logger import logger

    if not username:
        username = input("Enter username: ").strip()

    client = ChatClient(ClientConfig(endpoint=url, username=username))

    try:
        asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
    except Exception as e:
        logger.log_error("client", e)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Real-time Chat Client')
    parser.add_argument('--url', type=str, default=DEFAULT_BACKEND_URL,
                        help=f'Chat server URL (default: {DEFAULT_BACKEND_URL})')
    parser.add_argument('--username', type=str, default=None,
                        help='Username for chat (default: asked on start)')
    parser.add_argument('--log-level', type=str, default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: INFO)')

    args = parser.parse_args()

    from client.utils.logger import logger
    logger.set_level(getattr(logging, args.log_level))

    run_cli_client(args.username, args.url)


if __name__ == "__main__":
    main()
